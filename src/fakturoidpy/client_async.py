"""Asynchronous Fakturoid API client."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel

from fakturoidpy._version import __version__
from fakturoidpy.auth import BaseAuth, BearerTokenAuth, TokenAuth
from fakturoidpy.client_base import (
    AsyncPageIterator,
    ClientConfig,
    T,
    decode_entities,
    decode_entity,
    decode_json,
    encode_entity,
    ensure_success,
    require_positive,
    require_present,
)
from fakturoidpy.exceptions import FakturoidFormatError
from fakturoidpy.invoices import AsyncInvoicesProxy

logger = logging.getLogger(__name__)


class AsyncFakturoidClient:
    """Asynchronous client for the Fakturoid API.

    Holds the HTTP transport and the generic entity operations every resource
    proxy is built on. Resource proxies are exposed as attributes, e.g.
    ``client.invoices``.
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
        """Initialize async Fakturoid client.

        Args:
            account: Account slug (the part of the app URL after ``/accounts/``)
            email: Contact e-mail, used for Basic auth and the User-Agent header
            api_token: API token of the user (Basic authentication)
            access_token: OAuth access token obtained elsewhere
            base_url: Base URL for API
                (default: https://app.fakturoid.cz/api/v2/accounts/{account}/)
            timeout: Request timeout in seconds

        Raises:
            ValueError: If account, email or credentials are missing
        """
        if not account or not email:
            raise ValueError("Both account and email must be provided")

        self.auth: BaseAuth
        if api_token:
            self.auth = TokenAuth(email, api_token)
        elif access_token:
            self.auth = BearerTokenAuth(access_token)
        else:
            raise ValueError("Either api_token or access_token must be provided")

        self.account = account
        self.base_url = base_url or ClientConfig.BASE_URL.format(account=account)
        self.timeout = timeout

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={
                "User-Agent": ClientConfig.USER_AGENT.format(
                    version=__version__, email=email
                ),
                "Accept": "application/json",
            },
        )

        self.invoices = AsyncInvoicesProxy(self)

    async def __aenter__(self) -> AsyncFakturoidClient:
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make an authenticated HTTP request.

        Args:
            method: HTTP method
            path: Path relative to the account URL, may carry a query string
            **kwargs: Additional arguments for httpx request

        Returns:
            HTTP response

        Raises:
            FakturoidAPIError: On non-2xx responses
        """
        headers = self.auth.get_headers()
        if "headers" in kwargs:
            headers.update(kwargs.pop("headers"))

        logger.debug("%s %s", method, path)
        response = await self.client.request(
            method=method,
            url=path,
            headers=headers,
            **kwargs,
        )
        return ensure_success(response)

    async def fire_event(self, path: str) -> None:
        """POST to an event endpoint with an empty body.

        Args:
            path: Event path including its query string
        """
        await self._request("POST", path, content=b"")

    async def put_entity_fields(self, path: str, fields: dict[str, Any]) -> None:
        """PUT a partial JSON body to an entity, ignoring the response body.

        Args:
            path: Entity path
            fields: Fields to change
        """
        await self._request("PUT", path, json=fields)

    # Entity primitives

    async def get_single_entity(self, path: str, model_class: type[T]) -> T:
        """Get a single entity.

        Args:
            path: Entity path
            model_class: Model the JSON object is decoded into

        Returns:
            Decoded entity
        """
        response = await self._request("GET", path)
        return decode_entity(decode_json(response), model_class)

    async def get_paged_entities(
        self,
        path: str,
        page: int,
        model_class: type[T],
        params: dict[str, Any] | None = None,
    ) -> list[T]:
        """Get one page of a listing.

        Args:
            path: Listing path
            page: Page number, starting at 1
            model_class: Model the array items are decoded into
            params: Filter query parameters; None values are left out

        Returns:
            Entities on the page, possibly none
        """
        require_positive(page, "page")
        query = {k: v for k, v in (params or {}).items() if v is not None}
        query["page"] = page

        logger.debug("Fetching page %d of %s", page, path)
        response = await self._request("GET", path, params=query)
        return decode_entities(decode_json(response), model_class)

    def iter_paged_entities(
        self,
        path: str,
        model_class: type[T],
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
    ) -> AsyncPageIterator[T]:
        """Iterate lazily over every entity of a listing.

        Returns:
            Async iterator fetching pages until an empty one comes back
        """
        return AsyncPageIterator(self, path, model_class, params, max_pages)

    async def get_all_paged_entities(
        self,
        path: str,
        model_class: type[T],
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
    ) -> list[T]:
        """Get every entity of a listing.

        Pages are fetched from 1 upwards until one comes back empty. Memory use
        grows with the listing; ``max_pages`` bounds it if the server cannot be
        trusted to end the listing.

        Args:
            path: Listing path
            model_class: Model the array items are decoded into
            params: Filter query parameters
            max_pages: Optional ceiling on the number of pages requested

        Returns:
            All entities in page order
        """
        return [
            item
            async for item in self.iter_paged_entities(
                path, model_class, params, max_pages
            )
        ]

    async def create_entity(self, path: str, entity: BaseModel) -> int:
        """Create a new entity.

        Args:
            path: Collection path
            entity: Entity to create

        Returns:
            ID assigned by the server

        Raises:
            FakturoidFormatError: If the response carries no ID
        """
        require_present(entity, "entity")
        response = await self._request("POST", path, json=encode_entity(entity))
        data = decode_json(response)

        entity_id = data.get("id") if isinstance(data, dict) else None
        if isinstance(entity_id, bool) or not isinstance(entity_id, int):
            raise FakturoidFormatError("Missing id of new entity")
        logger.debug("Created %s with id %d", path, entity_id)
        return entity_id

    async def update_single_entity(
        self, path: str, entity: T, model_class: type[T] | None = None
    ) -> T:
        """Update an entity.

        Args:
            path: Entity path
            entity: Entity with the new values
            model_class: Model for the response (default: type of ``entity``)

        Returns:
            Entity as stored by the server after the update
        """
        require_present(entity, "entity")
        response = await self._request("PUT", path, json=encode_entity(entity))
        return decode_entity(decode_json(response), model_class or type(entity))

    async def delete_single_entity(self, path: str) -> None:
        """Delete an entity.

        Args:
            path: Entity path
        """
        await self._request("DELETE", path)
