"""Synchronous Fakturoid API client.

Every call runs the matching coroutine of the async client to completion on a
private event loop, so both clients share one implementation and raise the
same exceptions.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from datetime import date, datetime
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel

from fakturoidpy.auth import BaseAuth
from fakturoidpy.client_async import AsyncFakturoidClient
from fakturoidpy.client_base import ClientConfig, T
from fakturoidpy.invoices import (
    InvoiceFilter,
    InvoiceMessageType,
    InvoicePaymentStatus,
)
from fakturoidpy.models import Invoice, Payment

R = TypeVar("R")


class FakturoidClient:
    """Synchronous client for the Fakturoid API.

    Must not be used from inside a running event loop; use
    AsyncFakturoidClient there.
    """

    def __init__(
        self,
        *,
        account: str,
        email: str,
        api_token: str | None = None,
        access_token: str | None = None,
        base_url: str | None = None,
        timeout: float = ClientConfig.DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize Fakturoid client.

        Args:
            account: Account slug
            email: Contact e-mail, used for Basic auth and the User-Agent header
            api_token: API token of the user (Basic authentication)
            access_token: OAuth access token obtained elsewhere
            base_url: Base URL for API
            timeout: Request timeout in seconds

        Raises:
            ValueError: If account, email or credentials are missing
        """
        self.async_client = AsyncFakturoidClient(
            account=account,
            email=email,
            api_token=api_token,
            access_token=access_token,
            base_url=base_url,
            timeout=timeout,
        )
        self._loop = asyncio.new_event_loop()
        self.invoices = InvoicesProxy(self)

    @property
    def auth(self) -> BaseAuth:
        """Authentication used for every request."""
        return self.async_client.auth

    @property
    def base_url(self) -> str:
        """Account URL that request paths are relative to."""
        return self.async_client.base_url

    def __enter__(self) -> FakturoidClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the HTTP client and the event loop.

        Raises:
            RuntimeError: If called from inside a running event loop
        """
        if self._loop.is_closed():
            return
        self._check_no_running_loop()
        try:
            self._run(self.async_client.close())
        finally:
            self._loop.close()

    @staticmethod
    def _check_no_running_loop() -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return
        raise RuntimeError(
            "FakturoidClient cannot be used inside a running event loop; "
            "use AsyncFakturoidClient instead"
        )

    def _run(self, coro: Coroutine[Any, Any, R]) -> R:
        """Drive a coroutine to completion, letting its exception propagate."""
        try:
            self._check_no_running_loop()
        except RuntimeError:
            coro.close()
            raise
        return self._loop.run_until_complete(coro)

    # Entity primitives

    def get_single_entity(self, path: str, model_class: type[T]) -> T:
        """Get a single entity."""
        return self._run(self.async_client.get_single_entity(path, model_class))

    def get_paged_entities(
        self,
        path: str,
        page: int,
        model_class: type[T],
        params: dict[str, Any] | None = None,
    ) -> list[T]:
        """Get one page of a listing."""
        return self._run(
            self.async_client.get_paged_entities(path, page, model_class, params)
        )

    def get_all_paged_entities(
        self,
        path: str,
        model_class: type[T],
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
    ) -> list[T]:
        """Get every entity of a listing, stopping at the first empty page."""
        return self._run(
            self.async_client.get_all_paged_entities(
                path, model_class, params, max_pages
            )
        )

    def create_entity(self, path: str, entity: BaseModel) -> int:
        """Create a new entity and return its server-assigned ID."""
        return self._run(self.async_client.create_entity(path, entity))

    def update_single_entity(
        self, path: str, entity: T, model_class: type[T] | None = None
    ) -> T:
        """Update an entity and return the server's representation."""
        return self._run(
            self.async_client.update_single_entity(path, entity, model_class)
        )

    def delete_single_entity(self, path: str) -> None:
        """Delete an entity."""
        self._run(self.async_client.delete_single_entity(path))


class InvoicesProxy:
    """Blocking invoice operations; see AsyncInvoicesProxy for details."""

    def __init__(self, client: FakturoidClient) -> None:
        self.client = client
        self._proxy = client.async_client.invoices

    def select_single(self, invoice_id: int) -> Invoice:
        """Get a single invoice."""
        return self.client._run(self._proxy.select_single(invoice_id))

    def select(
        self,
        filters: InvoiceFilter | None = None,
        *,
        max_pages: int | None = None,
        **criteria: Any,
    ) -> list[Invoice]:
        """Get all invoices matching the filter."""
        return self.client._run(
            self._proxy.select(filters, max_pages=max_pages, **criteria)
        )

    def select_page(
        self,
        page: int,
        filters: InvoiceFilter | None = None,
        **criteria: Any,
    ) -> list[Invoice]:
        """Get one page of invoices matching the filter."""
        return self.client._run(self._proxy.select_page(page, filters, **criteria))

    def delete(self, invoice_id: int) -> None:
        """Delete an invoice."""
        self.client._run(self._proxy.delete(invoice_id))

    def create(self, entity: Invoice) -> int:
        """Create a new invoice and return its ID."""
        return self.client._run(self._proxy.create(entity))

    def update(self, entity: Invoice) -> Invoice:
        """Update an invoice."""
        return self.client._run(self._proxy.update(entity))

    def send_message(self, invoice_id: int, message_type: InvoiceMessageType) -> None:
        """Send an invoice e-mail, or mark the invoice as sent."""
        self.client._run(self._proxy.send_message(invoice_id, message_type))

    def set_payment_status(
        self,
        invoice_id: int,
        status: InvoicePaymentStatus,
        effective_date: datetime | date | None = None,
    ) -> None:
        """Set the payment status of an invoice."""
        self.client._run(
            self._proxy.set_payment_status(invoice_id, status, effective_date)
        )

    def create_payment(self, invoice_id: int, payment: Payment) -> int:
        """Record a payment for an invoice and return its ID."""
        return self.client._run(self._proxy.create_payment(invoice_id, payment))

    def delete_payment(self, invoice_id: int) -> None:
        """Delete the payment of an invoice."""
        self.client._run(self._proxy.delete_payment(invoice_id))

    def set_attachment(self, invoice_id: int, mime_type: str, content: bytes) -> None:
        """Replace the attachment of an invoice."""
        self.client._run(self._proxy.set_attachment(invoice_id, mime_type, content))

    def set_attachment_file(self, invoice_id: int, file_path: Path | str) -> None:
        """Replace the attachment of an invoice with a file from disk."""
        self.client._run(self._proxy.set_attachment_file(invoice_id, file_path))
