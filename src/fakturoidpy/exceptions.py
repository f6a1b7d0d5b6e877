"""Exceptions for the FakturoidPy library."""

from typing import Any

import httpx


class FakturoidError(Exception):
    """Base class for all FakturoidPy errors."""


class FakturoidInvalidArgumentError(FakturoidError, ValueError):
    """Raised before any request is sent when an argument is out of range or missing."""

    def __init__(self, argument: str, message: str) -> None:
        super().__init__(f"{argument}: {message}")
        self.argument = argument


class FakturoidFormatError(FakturoidError, ValueError):
    """Raised when a response body cannot be decoded or lacks an expected field."""


class FakturoidAPIError(FakturoidError, httpx.HTTPStatusError):
    """Base exception for all Fakturoid API errors.

    Extends httpx.HTTPStatusError so users can catch both FakturoidAPIError
    and httpx.HTTPStatusError to handle API errors.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: dict[str, Any] | None = None,
        request: httpx.Request | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        """Initialize FakturoidAPIError.

        Args:
            message: Error message
            status_code: HTTP status code from the API response
            response_data: Decoded JSON body of the response, if any
            request: The request that caused the error
            response: The response from the API
        """
        if request and response:
            super().__init__(message, request=request, response=response)
        else:
            Exception.__init__(self, message)

        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}
        self.body = response.text if response is not None else ""

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class FakturoidAuthError(FakturoidAPIError):
    """Raised when authentication fails (401/403)."""

    pass


class FakturoidNotFoundError(FakturoidAPIError):
    """Raised when a resource is not found (404)."""

    pass


class FakturoidValidationError(FakturoidAPIError):
    """Raised when the request is rejected as invalid (400/422)."""

    pass


class FakturoidRateLimitError(FakturoidAPIError):
    """Raised when the account's request limit is exceeded (429)."""

    pass


class FakturoidServerError(FakturoidAPIError):
    """Raised when server encounters an error (5xx)."""

    pass
