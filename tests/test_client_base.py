"""Tests for shared client helpers."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from fakturoidpy.client_base import (
    encode_data_uri,
    escape_query_value,
    format_round_trip,
    parse_error_response,
    require_positive,
)
from fakturoidpy.exceptions import (
    FakturoidAPIError,
    FakturoidInvalidArgumentError,
    FakturoidValidationError,
)
from fakturoidpy.invoices import (
    InvoiceFilter,
    InvoiceMessageType,
    InvoicePaymentStatus,
    InvoiceStatusCondition,
    InvoiceTypeCondition,
    invoice_list_path,
    invoice_status_token,
    message_event,
    payment_event,
)


class TestRoundTripTimestamp:
    """Test paid_at formatting."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (
                datetime(2024, 3, 1, 14, 30, 5, 250000, tzinfo=timezone(timedelta(hours=1))),
                "2024-03-01T14:30:05.25+01:00",
            ),
            (
                datetime(2024, 3, 1, 14, 30, 5, 123456, tzinfo=timezone(timedelta(hours=-5, minutes=-30))),
                "2024-03-01T14:30:05.123456-05:30",
            ),
            (datetime(2024, 3, 1, 14, 30, 5, tzinfo=timezone.utc), "2024-03-01T14:30:05Z"),
            (
                datetime(2024, 3, 1, 14, 30, 5, tzinfo=timezone(timedelta(0), "GMT")),
                "2024-03-01T14:30:05+00:00",
            ),
            (datetime(2024, 3, 1, 14, 30, 5), "2024-03-01T14:30:05"),
            (
                datetime(1890, 1, 1, 12, tzinfo=timezone(timedelta(hours=1, seconds=30))),
                "1890-01-01T12:00:00+01:00:30",
            ),
            (
                datetime(1890, 1, 1, 12, tzinfo=timezone(-timedelta(minutes=57, seconds=44))),
                "1890-01-01T12:00:00-00:57:44",
            ),
        ],
    )
    def test_format_round_trip(self, value: datetime, expected: str):
        """Test fractions are trimmed and offsets kept."""
        assert format_round_trip(value) == expected

    def test_escape_query_value(self):
        """Test plus and colon are percent-escaped."""
        assert (
            escape_query_value("2024-03-01T14:30:05.25+01:00")
            == "2024-03-01T14%3A30%3A05.25%2B01%3A00"
        )


class TestWireTokens:
    """Test enum to wire token mappings."""

    def test_list_paths(self):
        assert invoice_list_path(InvoiceTypeCondition.ANY) == "invoices.json"
        assert invoice_list_path(InvoiceTypeCondition.PROFORMA) == "invoices/proforma.json"
        assert invoice_list_path(InvoiceTypeCondition.REGULAR) == "invoices/regular.json"

    def test_status_tokens(self):
        assert invoice_status_token(InvoiceStatusCondition.ANY) is None
        assert [
            invoice_status_token(status)
            for status in InvoiceStatusCondition
            if status is not InvoiceStatusCondition.ANY
        ] == ["open", "sent", "overdue", "paid", "cancelled"]

    def test_message_events(self):
        assert message_event(InvoiceMessageType.NO_MESSAGE) == "mark_as_sent"
        assert message_event(InvoiceMessageType.INVOICE_MESSAGE) == "deliver"
        assert (
            message_event(InvoiceMessageType.PAYMENT_REMINDER_MESSAGE)
            == "deliver_reminder"
        )

    def test_payment_events(self):
        assert payment_event(InvoicePaymentStatus.PAID) == ("pay", True)
        assert payment_event(InvoicePaymentStatus.PROFORMA_PAID) == ("pay_proforma", True)
        assert payment_event(InvoicePaymentStatus.PARTIAL_PROFORMA_PAID) == (
            "pay_partial_proforma",
            True,
        )
        assert payment_event(InvoicePaymentStatus.CANCELLED) == ("cancel", False)
        assert payment_event(InvoicePaymentStatus.UNPAID) == ("remove_payment", False)

    def test_unknown_value(self):
        """Test values outside the enum are rejected, not passed through."""
        with pytest.raises(FakturoidInvalidArgumentError):
            message_event("shout")

    def test_filter_params(self):
        """Test dates are written in ISO format and empty criteria left out."""
        criteria = InvoiceFilter(
            status=InvoiceStatusCondition.PAID,
            since=datetime(2024, 1, 1, 0, 0),
        )
        assert criteria.path == "invoices.json"
        assert criteria.to_params() == {"status": "paid", "since": "2024-01-01T00:00:00"}

    def test_filter_is_frozen(self):
        criteria = InvoiceFilter()
        with pytest.raises(Exception):
            criteria.number = "1"


class TestArguments:
    """Test argument checks."""

    @pytest.mark.parametrize("value", [0, -1, True, "1", None, 1.0])
    def test_require_positive_rejects(self, value):
        with pytest.raises(FakturoidInvalidArgumentError):
            require_positive(value, "invoice_id")

    def test_require_positive_accepts(self):
        assert require_positive(1, "invoice_id") == 1

    def test_data_uri(self):
        assert encode_data_uri("application/pdf", b"%PDF") == "data:application/pdf;base64,JVBERg=="


class TestErrorParsing:
    """Test error response parsing."""

    def _response(self, status_code: int, **kwargs) -> httpx.Response:
        request = httpx.Request("GET", "https://app.fakturoid.cz/api/v2/accounts/x/invoices.json")
        return httpx.Response(status_code, request=request, **kwargs)

    def test_errors_dict(self):
        error = parse_error_response(
            self._response(422, json={"errors": {"number": ["has already been taken"]}})
        )
        assert isinstance(error, FakturoidValidationError)
        assert isinstance(error, httpx.HTTPStatusError)
        assert error.message == "number: has already been taken"
        assert error.response_data == {"errors": {"number": ["has already been taken"]}}

    def test_plain_text_body(self):
        error = parse_error_response(self._response(418, text="teapot"))
        assert type(error) is FakturoidAPIError
        assert str(error) == "[418] teapot"
        assert error.body == "teapot"

    def test_empty_body(self):
        error = parse_error_response(self._response(500))
        assert error.message == "HTTP 500 error"
