"""Pytest fixtures for FakturoidPy tests."""

from typing import Any

import pytest

from fakturoidpy import AsyncFakturoidClient, FakturoidClient


@pytest.fixture
def account() -> str:
    """Return a test account slug."""
    return "test-account"


@pytest.fixture
def email() -> str:
    """Return a test contact e-mail."""
    return "dev@example.com"


@pytest.fixture
def api_token() -> str:
    """Return a test API token."""
    return "test_api_token_12345"


@pytest.fixture
def credentials(account: str, email: str, api_token: str) -> dict[str, str]:
    """Return keyword arguments for constructing a client."""
    return {"account": account, "email": email, "api_token": api_token}


@pytest.fixture
def base_url(account: str) -> str:
    """Return the base API URL."""
    return f"https://app.fakturoid.cz/api/v2/accounts/{account}"


@pytest.fixture
def sync_client(credentials: dict[str, str]):
    """Create a sync FakturoidClient for testing."""
    client = FakturoidClient(**credentials)
    yield client
    client.close()


@pytest.fixture
async def async_client(credentials: dict[str, str]):
    """Create an async FakturoidClient for testing."""
    client = AsyncFakturoidClient(**credentials)
    yield client
    await client.close()


@pytest.fixture
def mock_invoice() -> dict[str, Any]:
    """Return mock invoice data."""
    return {
        "id": 1001,
        "proforma": False,
        "number": "2024-0001",
        "variable_symbol": "20240001",
        "subject_id": 16,
        "client_name": "Test Customer s.r.o.",
        "status": "open",
        "issued_on": "2024-03-01",
        "due": 14,
        "due_on": "2024-03-15",
        "currency": "CZK",
        "lines": [
            {
                "id": 1,
                "name": "Consulting",
                "quantity": "2.0",
                "unit_name": "h",
                "unit_price": "1500.0",
                "vat_rate": 21,
            }
        ],
        "subtotal": "3000.0",
        "total": "3630.0",
        "eet_records": [],
    }

