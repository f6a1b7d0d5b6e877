"""FakturoidPy - Python client for the Fakturoid invoicing API."""

from fakturoidpy._version import __version__
from fakturoidpy.client_async import AsyncFakturoidClient
from fakturoidpy.client_sync import FakturoidClient
from fakturoidpy.exceptions import (
    FakturoidAPIError,
    FakturoidAuthError,
    FakturoidError,
    FakturoidFormatError,
    FakturoidInvalidArgumentError,
    FakturoidNotFoundError,
    FakturoidRateLimitError,
    FakturoidServerError,
    FakturoidValidationError,
)
from fakturoidpy.invoices import (
    InvoiceFilter,
    InvoiceMessageType,
    InvoicePaymentStatus,
    InvoiceStatusCondition,
    InvoiceTypeCondition,
)
from fakturoidpy.models import Invoice, InvoiceLine, Payment

__all__ = [
    "__version__",
    "FakturoidClient",
    "AsyncFakturoidClient",
    "FakturoidError",
    "FakturoidAPIError",
    "FakturoidAuthError",
    "FakturoidFormatError",
    "FakturoidInvalidArgumentError",
    "FakturoidNotFoundError",
    "FakturoidRateLimitError",
    "FakturoidServerError",
    "FakturoidValidationError",
    "Invoice",
    "InvoiceLine",
    "Payment",
    "InvoiceFilter",
    "InvoiceMessageType",
    "InvoicePaymentStatus",
    "InvoiceStatusCondition",
    "InvoiceTypeCondition",
]
