"""Base client functionality for Fakturoid API."""

from __future__ import annotations

import base64
import logging
import mimetypes
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Generic, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from fakturoidpy.exceptions import (
    FakturoidAPIError,
    FakturoidAuthError,
    FakturoidFormatError,
    FakturoidInvalidArgumentError,
    FakturoidNotFoundError,
    FakturoidRateLimitError,
    FakturoidServerError,
    FakturoidValidationError,
)

if TYPE_CHECKING:
    from fakturoidpy.client_async import AsyncFakturoidClient

T = TypeVar("T", bound=BaseModel)

logger = logging.getLogger(__name__)


class ClientConfig:
    """Configuration for Fakturoid API client."""

    BASE_URL = "https://app.fakturoid.cz/api/v2/accounts/{account}/"
    DEFAULT_TIMEOUT = 30.0
    USER_AGENT = "FakturoidPy/{version} ({email})"
    DEFAULT_MIME_TYPE = "application/octet-stream"


def _error_message(error_data: dict[str, Any]) -> str | None:
    """Pull a human readable message out of an error body."""
    if "error" in error_data:
        return str(error_data["error"])
    errors = error_data.get("errors")
    if isinstance(errors, dict):
        # {"field": ["message", ...], ...}
        return "; ".join(
            f"{field}: {', '.join(map(str, messages)) if isinstance(messages, list) else messages}"
            for field, messages in errors.items()
        )
    if errors:
        return str(errors)
    if "message" in error_data:
        return str(error_data["message"])
    return None


def parse_error_response(response: httpx.Response) -> FakturoidAPIError:
    """Parse error response and return appropriate exception.

    Args:
        response: HTTP response from the API

    Returns:
        Appropriate FakturoidAPIError subclass
    """
    status_code = response.status_code
    error_data: dict[str, Any] = {}
    try:
        decoded = response.json()
        if isinstance(decoded, dict):
            error_data = decoded
    except ValueError:
        pass
    message = (
        _error_message(error_data) or response.text or f"HTTP {status_code} error"
    )

    request = response.request

    if status_code in (400, 422):
        return FakturoidValidationError(
            message, status_code, error_data, request, response
        )
    elif status_code in (401, 403):
        return FakturoidAuthError(message, status_code, error_data, request, response)
    elif status_code == 404:
        return FakturoidNotFoundError(
            message, status_code, error_data, request, response
        )
    elif status_code == 429:
        return FakturoidRateLimitError(
            message, status_code, error_data, request, response
        )
    elif status_code >= 500:
        return FakturoidServerError(message, status_code, error_data, request, response)
    else:
        return FakturoidAPIError(message, status_code, error_data, request, response)


def ensure_success(response: httpx.Response) -> httpx.Response:
    """Raise the matching FakturoidAPIError unless the response is 2xx."""
    if not response.is_success:
        logger.warning(
            "%s %s failed with HTTP %s",
            response.request.method,
            response.request.url,
            response.status_code,
        )
        raise parse_error_response(response)
    return response


def decode_json(response: httpx.Response) -> Any:
    """Decode a JSON response body, raising FakturoidFormatError if it is not JSON."""
    try:
        return response.json()
    except ValueError as e:
        raise FakturoidFormatError(
            f"Response from {response.request.url} is not valid JSON"
        ) from e


def decode_entity(data: Any, model_class: type[T]) -> T:
    """Validate decoded JSON against ``model_class``."""
    try:
        return model_class.model_validate(data)
    except ValidationError as e:
        raise FakturoidFormatError(
            f"Cannot decode {model_class.__name__}: {e}"
        ) from e


def decode_entities(data: Any, model_class: type[T]) -> list[T]:
    """Validate a decoded JSON array against ``model_class``."""
    if not isinstance(data, list):
        raise FakturoidFormatError(
            f"Expected a JSON array of {model_class.__name__}, got {type(data).__name__}"
        )
    return [decode_entity(item, model_class) for item in data]


def encode_entity(entity: BaseModel) -> dict[str, Any]:
    """Serialize a model to a JSON-ready dict, leaving unset values out."""
    return entity.model_dump(exclude_none=True, mode="json")


def require_positive(value: Any, name: str) -> int:
    """Return ``value`` if it is an int greater than zero, else raise."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise FakturoidInvalidArgumentError(name, "Value must be an integer.")
    if value < 1:
        raise FakturoidInvalidArgumentError(name, "Value must be greater than zero.")
    return value


def require_present(value: Any, name: str) -> Any:
    """Return ``value`` unless it is None."""
    if value is None:
        raise FakturoidInvalidArgumentError(name, "Value cannot be None.")
    return value


def format_round_trip(value: datetime) -> str:
    """Format a datetime so that parsing the text gives back the same value.

    Fractional seconds are written only as far as they are non-zero. Aware
    values carry their offset (``Z`` for ``timezone.utc``), naive values none.

    Args:
        value: Date and time to format

    Returns:
        ISO-8601 text such as ``2024-03-01T14:30:05.25+01:00``
    """
    text = value.replace(microsecond=0, tzinfo=None).isoformat()
    if value.microsecond:
        text += f".{value.microsecond:06d}".rstrip("0")

    offset = value.utcoffset()
    if offset is None:
        return text
    if value.tzinfo is timezone.utc:
        return text + "Z"

    sign = "-" if offset < timedelta(0) else "+"
    seconds = abs(int(offset.total_seconds()))
    text = f"{text}{sign}{seconds // 3600:02d}:{seconds // 60 % 60:02d}"
    if seconds % 60:
        # sub-minute offsets, e.g. historical local mean time
        text += f":{seconds % 60:02d}"
    return text


def escape_query_value(value: str) -> str:
    """Percent-escape a query value, leaving only unreserved characters as-is."""
    return quote(value, safe="")


def encode_data_uri(mime_type: str, content: bytes) -> str:
    """Encode file content as a base64 ``data:`` URI."""
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def prepare_attachment(file: Path | str) -> tuple[str, bytes]:
    """Read a file for upload.

    OSErrors from reading the file are not caught.

    Args:
        file: File path or file path string

    Returns:
        Tuple of (content_type, file_bytes)
    """
    file_path = Path(file)
    file_bytes = file_path.read_bytes()
    content_type = mimetypes.guess_type(file_path)[0] or ClientConfig.DEFAULT_MIME_TYPE
    return content_type, file_bytes


class AsyncPageIterator(Generic[T]):
    """Async iterator over every item of a paged listing.

    Pages are requested one by one starting at 1 and iteration stops at the
    first empty page. The API sends no total count, so a server that never
    returns an empty page keeps this iterator going; pass ``max_pages`` to
    put a ceiling on it.
    """

    def __init__(
        self,
        client: AsyncFakturoidClient,
        path: str,
        model_class: type[T],
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
    ) -> None:
        """Initialize async page iterator.

        Args:
            client: Client used to fetch each page
            path: Listing path relative to the account URL
            model_class: Pydantic model class for response items
            params: Query parameters sent with every page
            max_pages: Optional number of pages after which iteration stops
        """
        if max_pages is not None:
            require_positive(max_pages, "max_pages")
        self.client = client
        self.path = path
        self.model_class = model_class
        self.params = dict(params or {})
        self.max_pages = max_pages
        self.current_page = 0
        self.items: list[T] = []
        self.index = 0
        self._exhausted = False

    def __aiter__(self) -> AsyncPageIterator[T]:
        """Return async iterator."""
        return self

    async def __anext__(self) -> T:
        """Get next item, fetching new page if needed."""
        while self.index >= len(self.items):
            if self._exhausted or (
                self.max_pages is not None and self.current_page >= self.max_pages
            ):
                raise StopAsyncIteration
            await self._fetch_page(self.current_page + 1)

        item = self.items[self.index]
        self.index += 1
        return item

    async def _fetch_page(self, page: int) -> None:
        self.items = await self.client.get_paged_entities(
            self.path, page, self.model_class, self.params
        )
        self.current_page = page
        self.index = 0
        if not self.items:
            self._exhausted = True
