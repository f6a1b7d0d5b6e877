"""Pydantic models for Fakturoid API records."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class FakturoidModel(BaseModel):
    """Base model for records exchanged with the API.

    Fields the model does not declare are kept and sent back unchanged.
    """

    model_config = ConfigDict(extra="allow")


class InvoiceLine(FakturoidModel):
    """Single line item of an invoice."""

    id: int | None = None
    name: str | None = None
    quantity: Decimal | None = None
    unit_name: str | None = None
    unit_price: Decimal | None = None
    vat_rate: Decimal | None = None
    unit_price_without_vat: Decimal | None = None
    unit_price_with_vat: Decimal | None = None


class Invoice(FakturoidModel):
    """Invoice record.

    The authoritative state lives on the server; a locally built instance is
    only a transient payload for create and update calls.
    """

    id: int | None = None
    custom_id: str | None = None
    proforma: bool | None = None
    partial_proforma: bool | None = None
    number: str | None = None
    variable_symbol: str | None = None
    subject_id: int | None = None
    client_name: str | None = None
    status: str | None = None
    issued_on: date | None = None
    taxable_fulfillment_due: date | None = None
    due: int | None = None
    due_on: date | None = None
    sent_at: datetime | None = None
    paid_at: datetime | None = None
    reminder_sent_at: datetime | None = None
    cancelled_at: datetime | None = None
    note: str | None = None
    footer_note: str | None = None
    private_note: str | None = None
    tags: list[str] | None = None
    bank_account_id: int | None = None
    iban: str | None = None
    payment_method: str | None = None
    currency: str | None = None
    exchange_rate: Decimal | None = None
    language: str | None = None
    lines: list[InvoiceLine] | None = None
    subtotal: Decimal | None = None
    total: Decimal | None = None
    native_subtotal: Decimal | None = None
    native_total: Decimal | None = None
    remaining_amount: Decimal | None = None
    html_url: str | None = None
    public_html_url: str | None = None
    url: str | None = None
    pdf_url: str | None = None
    subject_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Payment(FakturoidModel):
    """Payment recorded against an invoice.

    Every field is optional; the server fills in today's date for ``paid_on``
    and the remaining balance for ``amount`` when they are omitted.
    """

    id: int | None = None
    paid_on: date | None = None
    currency: str | None = None
    amount: Decimal | None = None
    native_amount: Decimal | None = None
    mark_document_as_paid: bool | None = None
    # final_invoice_paid, final_invoice, tax_document or none
    proforma_followup_document: str | None = None
    send_thank_you_email: bool | None = None
    variable_symbol: str | None = None
    bank_account_id: int | None = None
    tax_document_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
