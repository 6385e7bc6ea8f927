"""FreshBooksPy - Python client for the FreshBooks XML API."""

from freshbookspy._version import __version__
from freshbookspy.client import FreshBooksClient
from freshbookspy.exceptions import (
    FreshBooksAPIError,
    FreshBooksAuthError,
    FreshBooksDecodeError,
    FreshBooksError,
    FreshBooksExhaustedError,
    FreshBooksFetchError,
    FreshBooksHTTPError,
    FreshBooksNotFoundError,
    FreshBooksRateLimitError,
    FreshBooksServerError,
    FreshBooksTransportError,
)
from freshbookspy.models import Category, Client, Expense, Invoice, Line, Page, Payment
from freshbookspy.pagination import PaginatedIterator

__all__ = [
    "__version__",
    "FreshBooksClient",
    "PaginatedIterator",
    "Page",
    "Invoice",
    "Line",
    "Payment",
    "Expense",
    "Client",
    "Category",
    "FreshBooksError",
    "FreshBooksAPIError",
    "FreshBooksAuthError",
    "FreshBooksDecodeError",
    "FreshBooksExhaustedError",
    "FreshBooksFetchError",
    "FreshBooksHTTPError",
    "FreshBooksNotFoundError",
    "FreshBooksRateLimitError",
    "FreshBooksServerError",
    "FreshBooksTransportError",
]
