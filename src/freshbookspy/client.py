"""Synchronous FreshBooks API client."""

from __future__ import annotations

import functools
import logging
import os
from datetime import date
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel

from freshbookspy.auth import RateLimiter, TokenAuth
from freshbookspy.envelope import Request, RequestMethod, Response, decode, encode
from freshbookspy.models import Category, Client, Expense, Invoice, Page, Payment
from freshbookspy.pagination import PaginatedIterator
from freshbookspy.transport import ClientConfig, Transport

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class FreshBooksClient:
    """Synchronous client for the FreshBooks XML API.

    Each ``list_*`` method fetches one page. The iterator methods
    (``get_invoices``, ``get_payments``, ``get_expenses``, ``get_clients``)
    return a PaginatedIterator that walks every page lazily.
    """

    def __init__(
        self,
        api_url: str | None = None,
        api_token: str | None = None,
        *,
        user_agent: str = ClientConfig.USER_AGENT,
        timeout: float = ClientConfig.DEFAULT_TIMEOUT,
        transport: Transport | None = None,
        http_client: httpx.Client | None = None,
        max_requests_per_second: int | None = None,
    ) -> None:
        """Initialize FreshBooks client.

        Args:
            api_url: Account API endpoint URL
            api_token: Account authentication token
            user_agent: User-Agent header value
            timeout: Request timeout in seconds
            transport: Pre-built transport. api_url, api_token, user_agent and
                timeout are then unused, and http_client or
                max_requests_per_second must not be given
            http_client: httpx client to send requests with
            max_requests_per_second: Optional client-side request throttle

        Raises:
            ValueError: If neither a transport nor api_url and api_token are
                provided, or if transport is combined with http_client or
                max_requests_per_second
        """
        if transport is not None and (
            http_client is not None or max_requests_per_second is not None
        ):
            raise ValueError(
                "http_client and max_requests_per_second cannot be combined with transport"
            )
        if transport is None:
            if not api_url or not api_token:
                raise ValueError("Either transport or both api_url and api_token must be provided")
            transport = Transport(
                api_url,
                TokenAuth(api_token),
                user_agent=user_agent,
                timeout=timeout,
                http_client=http_client,
                rate_limiter=(
                    RateLimiter(max_requests_per_second)
                    if max_requests_per_second
                    else None
                ),
            )
        self.transport = transport

    @classmethod
    def from_env(cls, **kwargs: Any) -> FreshBooksClient:
        """Create a client from ``FRESHBOOKS_*`` environment variables.

        Reads FRESHBOOKS_API_URL and FRESHBOOKS_API_TOKEN, and optionally
        FRESHBOOKS_USER_AGENT and FRESHBOOKS_TIMEOUT. Keyword arguments are
        passed through to the constructor.
        """
        api_url = os.environ.get("FRESHBOOKS_API_URL")
        api_token = os.environ.get("FRESHBOOKS_API_TOKEN")
        if not api_url or not api_token:
            raise ValueError("Missing FRESHBOOKS_API_URL or FRESHBOOKS_API_TOKEN")

        if "FRESHBOOKS_USER_AGENT" in os.environ:
            kwargs.setdefault("user_agent", os.environ["FRESHBOOKS_USER_AGENT"])
        if "FRESHBOOKS_TIMEOUT" in os.environ:
            kwargs.setdefault("timeout", float(os.environ["FRESHBOOKS_TIMEOUT"]))

        return cls(api_url, api_token, **kwargs)

    def __enter__(self) -> FreshBooksClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the underlying transport."""
        self.transport.close()

    def _request(self, request: Request) -> Response:
        """Send one request envelope and decode the answer.

        Raises:
            FreshBooksAPIError: If the service rejected the request
            FreshBooksDecodeError: If the answer could not be decoded
            FreshBooksTransportError: On connectivity problems
        """
        logger.debug("Calling %s", request.method.value)
        response = decode(self.transport.send(encode(request)))
        return response.raise_for_status()

    def _list(
        self,
        method: RequestMethod,
        container: str,
        model: type[M],
        page: int,
        per_page: int | None,
        **filters: Any,
    ) -> Page[M]:
        request = Request(method=method, page=page, per_page=per_page, filters=filters)
        return self._request(request).page_of(container, method.kind, model)

    def _get(self, method: RequestMethod, model: type[M], item_id: str | int) -> M:
        request = Request(method=method, id=item_id)
        return self._request(request).item(method.kind, model)

    def _create(self, method: RequestMethod, item: BaseModel) -> str:
        request = Request(method=method, item=item)
        return self._request(request).value(f"{method.kind}_id")

    # Invoices

    def list_invoices(
        self,
        page: int = 1,
        per_page: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        client_id: str | None = None,
        status: str | None = None,
    ) -> Page[Invoice]:
        """Get one page of invoices.

        Only invoice summaries are returned; use get_invoice for full details.

        Args:
            page: 1-based page number
            per_page: Items per page (service default when None)
            date_from: Only invoices dated on or after this day
            date_to: Only invoices dated on or before this day
            client_id: Only invoices for this client
            status: Only invoices with this status, e.g. ``paid``

        Returns:
            Page of invoices
        """
        return self._list(
            RequestMethod.INVOICE_LIST,
            "invoices",
            Invoice,
            page,
            per_page,
            date_from=date_from,
            date_to=date_to,
            client_id=client_id,
            status=status,
        )

    def get_invoices(
        self,
        per_page: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        client_id: str | None = None,
        status: str | None = None,
    ) -> PaginatedIterator[Invoice]:
        """Iterate over all invoices matching the filters.

        Returns:
            Iterator of invoice summaries
        """
        return PaginatedIterator(
            functools.partial(
                self.list_invoices,
                per_page=per_page,
                date_from=date_from,
                date_to=date_to,
                client_id=client_id,
                status=status,
            )
        )

    def get_invoice(self, invoice_id: str | int) -> Invoice:
        """Get the full details of an invoice, including its lines."""
        return self._get(RequestMethod.INVOICE_GET, Invoice, invoice_id)

    def create_invoice(self, invoice: Invoice) -> str:
        """Create an invoice and return its id."""
        return self._create(RequestMethod.INVOICE_CREATE, invoice)

    # Payments

    def list_payments(
        self,
        page: int = 1,
        per_page: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        client_id: str | None = None,
    ) -> Page[Payment]:
        """Get one page of payments.

        Args:
            page: 1-based page number
            per_page: Items per page (service default when None)
            date_from: Only payments made on or after this day
            date_to: Only payments made on or before this day
            client_id: Only payments from this client

        Returns:
            Page of payments
        """
        return self._list(
            RequestMethod.PAYMENT_LIST,
            "payments",
            Payment,
            page,
            per_page,
            date_from=date_from,
            date_to=date_to,
            client_id=client_id,
        )

    def get_payments(
        self,
        per_page: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        client_id: str | None = None,
    ) -> PaginatedIterator[Payment]:
        """Iterate over all payments matching the filters."""
        return PaginatedIterator(
            functools.partial(
                self.list_payments,
                per_page=per_page,
                date_from=date_from,
                date_to=date_to,
                client_id=client_id,
            )
        )

    def get_payment(self, payment_id: str | int) -> Payment:
        """Get a specific payment."""
        return self._get(RequestMethod.PAYMENT_GET, Payment, payment_id)

    def create_payment(self, payment: Payment) -> str:
        """Record a payment and return its id."""
        return self._create(RequestMethod.PAYMENT_CREATE, payment)

    # Expenses

    def list_expenses(
        self,
        page: int = 1,
        per_page: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        client_id: str | None = None,
        category_id: str | None = None,
        project_id: str | None = None,
    ) -> Page[Expense]:
        """Get one page of expenses.

        Args:
            page: 1-based page number
            per_page: Items per page (service default when None)
            date_from: Only expenses dated on or after this day
            date_to: Only expenses dated on or before this day
            client_id: Only expenses assigned to this client
            category_id: Only expenses in this category
            project_id: Only expenses for this project

        Returns:
            Page of expenses
        """
        return self._list(
            RequestMethod.EXPENSE_LIST,
            "expenses",
            Expense,
            page,
            per_page,
            date_from=date_from,
            date_to=date_to,
            client_id=client_id,
            category_id=category_id,
            project_id=project_id,
        )

    def get_expenses(
        self,
        per_page: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        client_id: str | None = None,
        category_id: str | None = None,
        project_id: str | None = None,
    ) -> PaginatedIterator[Expense]:
        """Iterate over all expenses matching the filters."""
        return PaginatedIterator(
            functools.partial(
                self.list_expenses,
                per_page=per_page,
                date_from=date_from,
                date_to=date_to,
                client_id=client_id,
                category_id=category_id,
                project_id=project_id,
            )
        )

    def get_expense(self, expense_id: str | int) -> Expense:
        """Get a specific expense."""
        return self._get(RequestMethod.EXPENSE_GET, Expense, expense_id)

    def create_expense(self, expense: Expense) -> str:
        """Create an expense and return its id."""
        return self._create(RequestMethod.EXPENSE_CREATE, expense)

    # Clients

    def list_clients(
        self,
        page: int = 1,
        per_page: int | None = None,
        username: str | None = None,
        email: str | None = None,
    ) -> Page[Client]:
        """Get one page of clients.

        Only client summaries are returned, without full address information.

        Args:
            page: 1-based page number
            per_page: Items per page (service default when None)
            username: Only clients with this username
            email: Only clients with this email address

        Returns:
            Page of clients
        """
        return self._list(
            RequestMethod.CLIENT_LIST,
            "clients",
            Client,
            page,
            per_page,
            username=username,
            email=email,
        )

    def get_clients(
        self,
        per_page: int | None = None,
        username: str | None = None,
        email: str | None = None,
    ) -> PaginatedIterator[Client]:
        """Iterate over all clients matching the filters."""
        return PaginatedIterator(
            functools.partial(
                self.list_clients, per_page=per_page, username=username, email=email
            )
        )

    def get_client(self, client_id: str | int) -> Client:
        """Get the full details of a client."""
        return self._get(RequestMethod.CLIENT_GET, Client, client_id)

    def create_client(self, client: Client) -> str:
        """Create a client and return its id."""
        return self._create(RequestMethod.CLIENT_CREATE, client)

    # Categories

    def list_categories(self) -> list[Category]:
        """Get all expense categories."""
        response = self._request(Request(method=RequestMethod.CATEGORY_LIST))
        return response.items("categories", "category", Category)

    def get_category(self, category_id: str | int) -> Category:
        """Get a specific expense category."""
        return self._get(RequestMethod.CATEGORY_GET, Category, category_id)
