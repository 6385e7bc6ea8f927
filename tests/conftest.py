"""Pytest fixtures for FreshBooksPy tests."""

from collections.abc import Callable, Iterator

import pytest

from freshbookspy import FreshBooksClient


@pytest.fixture
def api_url() -> str:
    """Return the test account API endpoint."""
    return "https://sample.freshbooks.com/api/2.1/xml-in"


@pytest.fixture
def api_token() -> str:
    """Return a test API token."""
    return "test_api_token_12345"


@pytest.fixture
def client(api_url: str, api_token: str) -> Iterator[FreshBooksClient]:
    """Create a FreshBooksClient for testing."""
    client = FreshBooksClient(api_url, api_token)
    yield client
    client.close()


@pytest.fixture
def envelope() -> Callable[..., str]:
    """Return a builder for response envelopes."""

    def build(body: str = "", status: str = "ok") -> str:
        return (
            '<?xml version="1.0" encoding="utf-8"?>'
            f'<response xmlns="http://www.freshbooks.com/api/" status="{status}">'
            f"{body}</response>"
        )

    return build


@pytest.fixture
def invoice_xml() -> Callable[[int], str]:
    """Return a builder for invoice summary elements."""

    def build(invoice_id: int) -> str:
        return (
            "<invoice>"
            f"<invoice_id>{invoice_id}</invoice_id>"
            "<client_id>13</client_id>"
            f"<number>FB{invoice_id:05d}</number>"
            "<amount>23.50</amount>"
            "<status>sent</status>"
            "<date>2024-06-23 00:00:00</date>"
            "</invoice>"
        )

    return build
