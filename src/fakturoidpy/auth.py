"""Authentication for the Fakturoid API."""

import base64
from abc import ABC, abstractmethod


class BaseAuth(ABC):
    """Base authentication class."""

    @abstractmethod
    def get_headers(self) -> dict[str, str]:
        """Get authentication headers for requests."""
        pass


class TokenAuth(BaseAuth):
    """HTTP Basic authentication with the account e-mail and API token."""

    def __init__(self, email: str, api_token: str) -> None:
        """Initialize token authentication.

        Args:
            email: E-mail of the Fakturoid user owning the token
            api_token: API token from the user's settings page
        """
        self.email = email
        self.api_token = api_token

    def get_headers(self) -> dict[str, str]:
        """Get authentication headers."""
        credentials = f"{self.email}:{self.api_token}".encode()
        return {"Authorization": f"Basic {base64.b64encode(credentials).decode('ascii')}"}


class BearerTokenAuth(BaseAuth):
    """Authentication with an already obtained OAuth access token."""

    def __init__(self, access_token: str) -> None:
        """Initialize bearer token authentication.

        Args:
            access_token: OAuth access token
        """
        self.access_token = access_token

    def get_headers(self) -> dict[str, str]:
        """Get authentication headers."""
        return {"Authorization": f"Bearer {self.access_token}"}
