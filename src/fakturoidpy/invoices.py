"""Invoices resource of the Fakturoid API."""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, ValidationError

from fakturoidpy.client_base import (
    AsyncPageIterator,
    encode_data_uri,
    escape_query_value,
    format_round_trip,
    prepare_attachment,
    require_positive,
    require_present,
)
from fakturoidpy.exceptions import FakturoidInvalidArgumentError
from fakturoidpy.models import Invoice, Payment

if TYPE_CHECKING:
    from fakturoidpy.client_async import AsyncFakturoidClient

logger = logging.getLogger(__name__)


class InvoiceTypeCondition(str, Enum):
    """Invoice type to list."""

    ANY = "any"
    PROFORMA = "proforma"
    REGULAR = "regular"


class InvoiceStatusCondition(str, Enum):
    """Invoice status to list."""

    ANY = "any"
    # Not paid, not sent and not overdue
    OPEN = "open"
    # Sent and not overdue
    SENT = "sent"
    OVERDUE = "overdue"
    PAID = "paid"
    # Only for accounts that are not VAT payers
    CANCELLED = "cancelled"


class InvoicePaymentStatus(str, Enum):
    """Payment status an invoice can be switched to."""

    UNPAID = "unpaid"
    PAID = "paid"
    PROFORMA_PAID = "proforma_paid"
    PARTIAL_PROFORMA_PAID = "partial_proforma_paid"
    # For proformas and invoices without VAT
    CANCELLED = "cancelled"


class InvoiceMessageType(str, Enum):
    """E-mail sent when an invoice is delivered."""

    # Send nothing, only mark the invoice as sent
    NO_MESSAGE = "no_message"
    INVOICE_MESSAGE = "invoice_message"
    PAYMENT_REMINDER_MESSAGE = "payment_reminder_message"


def invoice_list_path(invoice_type: InvoiceTypeCondition) -> str:
    """Return the listing path for an invoice type."""
    match invoice_type:
        case InvoiceTypeCondition.ANY:
            return "invoices.json"
        case InvoiceTypeCondition.PROFORMA:
            return "invoices/proforma.json"
        case InvoiceTypeCondition.REGULAR:
            return "invoices/regular.json"
    raise FakturoidInvalidArgumentError("type", f"Unknown invoice type {invoice_type!r}")


def invoice_status_token(status: InvoiceStatusCondition) -> str | None:
    """Return the ``status`` query value, or None when any status matches."""
    match status:
        case InvoiceStatusCondition.ANY:
            return None
        case InvoiceStatusCondition.OPEN:
            return "open"
        case InvoiceStatusCondition.SENT:
            return "sent"
        case InvoiceStatusCondition.OVERDUE:
            return "overdue"
        case InvoiceStatusCondition.PAID:
            return "paid"
        case InvoiceStatusCondition.CANCELLED:
            return "cancelled"
    raise FakturoidInvalidArgumentError("status", f"Unknown invoice status {status!r}")


def message_event(message_type: InvoiceMessageType) -> str:
    """Return the event fired to deliver an invoice."""
    match message_type:
        case InvoiceMessageType.NO_MESSAGE:
            return "mark_as_sent"
        case InvoiceMessageType.INVOICE_MESSAGE:
            return "deliver"
        case InvoiceMessageType.PAYMENT_REMINDER_MESSAGE:
            return "deliver_reminder"
    raise FakturoidInvalidArgumentError(
        "message_type", f"Unknown message type {message_type!r}"
    )


def payment_event(status: InvoicePaymentStatus) -> tuple[str, bool]:
    """Return the event for a payment status and whether it takes ``paid_at``."""
    match status:
        case InvoicePaymentStatus.PAID:
            return "pay", True
        case InvoicePaymentStatus.PROFORMA_PAID:
            return "pay_proforma", True
        case InvoicePaymentStatus.PARTIAL_PROFORMA_PAID:
            return "pay_partial_proforma", True
        case InvoicePaymentStatus.CANCELLED:
            return "cancel", False
        case InvoicePaymentStatus.UNPAID:
            return "remove_payment", False
    raise FakturoidInvalidArgumentError(
        "status", f"Unknown payment status {status!r}"
    )


class InvoiceFilter(BaseModel):
    """Criteria for listing invoices."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: InvoiceTypeCondition = InvoiceTypeCondition.ANY
    status: InvoiceStatusCondition = InvoiceStatusCondition.ANY
    subject_id: int | None = None
    since: datetime | date | str | None = None
    number: str | None = None

    @property
    def path(self) -> str:
        """Listing path for the selected invoice type."""
        return invoice_list_path(self.type)

    def to_params(self) -> dict[str, Any]:
        """Translate the criteria to query parameters."""
        if self.subject_id is not None:
            require_positive(self.subject_id, "subject_id")

        since = self.since
        if isinstance(since, (date, datetime)):
            since = since.isoformat()

        params: dict[str, Any] = {
            "status": invoice_status_token(self.status),
            "subject_id": self.subject_id,
            "since": since,
            "number": self.number,
        }
        return {k: v for k, v in params.items() if v is not None}


def _resolve_filter(
    filters: InvoiceFilter | None, criteria: dict[str, Any]
) -> InvoiceFilter:
    if filters is not None:
        if criteria:
            raise FakturoidInvalidArgumentError(
                "filters", "Pass either an InvoiceFilter or keyword criteria, not both."
            )
        return filters
    try:
        return InvoiceFilter(**criteria)
    except ValidationError as e:
        raise FakturoidInvalidArgumentError("filters", str(e)) from e


def _invoice_path(invoice_id: int) -> str:
    return f"invoices/{invoice_id}.json"


class AsyncInvoicesProxy:
    """Invoice operations.

    Each event call (sending, payment status) asks the server to move the
    invoice to another state; the state itself is never tracked here.
    """

    def __init__(self, client: AsyncFakturoidClient) -> None:
        self.client = client

    async def select_single(self, invoice_id: int) -> Invoice:
        """Get a single invoice.

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice details
        """
        require_positive(invoice_id, "invoice_id")
        return await self.client.get_single_entity(_invoice_path(invoice_id), Invoice)

    async def select(
        self,
        filters: InvoiceFilter | None = None,
        *,
        max_pages: int | None = None,
        **criteria: Any,
    ) -> list[Invoice]:
        """Get all invoices matching the filter.

        Args:
            filters: Listing criteria
            max_pages: Optional ceiling on the number of pages requested
            **criteria: InvoiceFilter fields, as an alternative to ``filters``

        Returns:
            Invoices from every page
        """
        resolved = _resolve_filter(filters, criteria)
        return await self.client.get_all_paged_entities(
            resolved.path, Invoice, resolved.to_params(), max_pages
        )

    def iter_select(
        self,
        filters: InvoiceFilter | None = None,
        *,
        max_pages: int | None = None,
        **criteria: Any,
    ) -> AsyncPageIterator[Invoice]:
        """Iterate lazily over invoices matching the filter.

        Invalid arguments are reported here, before the first page is fetched.
        """
        resolved = _resolve_filter(filters, criteria)
        return self.client.iter_paged_entities(
            resolved.path, Invoice, resolved.to_params(), max_pages
        )

    async def select_page(
        self,
        page: int,
        filters: InvoiceFilter | None = None,
        **criteria: Any,
    ) -> list[Invoice]:
        """Get one page of invoices matching the filter.

        Args:
            page: Page number, starting at 1
            filters: Listing criteria
            **criteria: InvoiceFilter fields, as an alternative to ``filters``

        Returns:
            Invoices on the page, possibly none
        """
        require_positive(page, "page")
        resolved = _resolve_filter(filters, criteria)
        return await self.client.get_paged_entities(
            resolved.path, page, Invoice, resolved.to_params()
        )

    async def delete(self, invoice_id: int) -> None:
        """Delete an invoice."""
        require_positive(invoice_id, "invoice_id")
        await self.client.delete_single_entity(_invoice_path(invoice_id))

    async def create(self, entity: Invoice) -> int:
        """Create a new invoice.

        Returns:
            ID of the new invoice
        """
        require_present(entity, "entity")
        return await self.client.create_entity("invoices.json", entity)

    async def update(self, entity: Invoice) -> Invoice:
        """Update an invoice.

        Args:
            entity: Invoice with ``id`` set

        Returns:
            Invoice as stored after the update
        """
        require_present(entity, "entity")
        invoice_id = require_positive(entity.id, "entity.id")
        return await self.client.update_single_entity(
            _invoice_path(invoice_id), entity, Invoice
        )

    async def send_message(
        self, invoice_id: int, message_type: InvoiceMessageType
    ) -> None:
        """Send an invoice e-mail, or mark the invoice as sent.

        Args:
            invoice_id: Invoice ID
            message_type: Message to send
        """
        require_positive(invoice_id, "invoice_id")
        event = message_event(message_type)
        logger.info("Firing %s on invoice %d", event, invoice_id)
        await self.client.fire_event(f"invoices/{invoice_id}/fire.json?event={event}")

    async def set_payment_status(
        self,
        invoice_id: int,
        status: InvoicePaymentStatus,
        effective_date: datetime | date | None = None,
    ) -> None:
        """Set the payment status of an invoice.

        Args:
            invoice_id: Invoice ID
            status: New payment status
            effective_date: When the payment was made, for the paid statuses
                (default: local time now, with its UTC offset). A plain date
                is sent as midnight of that day without an offset.
        """
        require_positive(invoice_id, "invoice_id")
        event, takes_date = payment_event(status)

        path = f"invoices/{invoice_id}/fire.json?event={event}"
        if takes_date:
            if effective_date is None:
                effective_date = datetime.now().astimezone()
            elif not isinstance(effective_date, datetime):
                if not isinstance(effective_date, date):
                    raise FakturoidInvalidArgumentError(
                        "effective_date", "Value must be a date or datetime."
                    )
                effective_date = datetime.combine(effective_date, time())
            path += "&paid_at=" + escape_query_value(format_round_trip(effective_date))

        logger.info("Firing %s on invoice %d", event, invoice_id)
        await self.client.fire_event(path)

    async def create_payment(self, invoice_id: int, payment: Payment) -> int:
        """Record a payment for an invoice.

        Args:
            invoice_id: Invoice ID
            payment: Payment details; omitted fields get server defaults

        Returns:
            ID of the new payment
        """
        require_positive(invoice_id, "invoice_id")
        require_present(payment, "payment")
        return await self.client.create_entity(
            f"invoices/{invoice_id}/payments.json", payment
        )

    async def delete_payment(self, invoice_id: int) -> None:
        """Delete the payment of an invoice."""
        require_positive(invoice_id, "invoice_id")
        await self.client.delete_single_entity(f"invoices/{invoice_id}/payments.json")

    async def set_attachment(
        self, invoice_id: int, mime_type: str, content: bytes
    ) -> None:
        """Replace the attachment of an invoice.

        Args:
            invoice_id: Invoice ID
            mime_type: MIME type of the content
            content: File content
        """
        require_positive(invoice_id, "invoice_id")
        require_present(mime_type, "mime_type")
        require_present(content, "content")

        await self.client.put_entity_fields(
            _invoice_path(invoice_id),
            {"attachment": encode_data_uri(mime_type, bytes(content))},
        )

    async def set_attachment_file(self, invoice_id: int, file_path: Path | str) -> None:
        """Replace the attachment of an invoice with a file from disk.

        The MIME type is guessed from the file extension.

        Args:
            invoice_id: Invoice ID
            file_path: Path of the file to attach
        """
        require_positive(invoice_id, "invoice_id")
        require_present(file_path, "file_path")

        mime_type, content = prepare_attachment(file_path)
        await self.set_attachment(invoice_id, mime_type, content)
