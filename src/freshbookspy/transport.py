"""HTTP transport for the FreshBooks XML API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from freshbookspy._version import __version__
from freshbookspy.auth import RateLimiter, TokenAuth
from freshbookspy.exceptions import (
    FreshBooksAuthError,
    FreshBooksHTTPError,
    FreshBooksNotFoundError,
    FreshBooksRateLimitError,
    FreshBooksServerError,
    FreshBooksTransportError,
)

logger = logging.getLogger(__name__)


class ClientConfig:
    """Configuration defaults for the FreshBooks API client."""

    DEFAULT_TIMEOUT = 30.0
    USER_AGENT = f"FreshBooksPy/{__version__}"
    CONTENT_TYPE = "text/xml; charset=utf-8"


def parse_error_response(response: httpx.Response) -> FreshBooksHTTPError:
    """Parse an HTTP error response and return the matching exception.

    Args:
        response: HTTP response from the API

    Returns:
        Appropriate FreshBooksHTTPError subclass
    """
    status_code = response.status_code
    message = response.reason_phrase or f"HTTP {status_code} error"
    kwargs: dict[str, Any] = {"request": response.request, "response": response}

    if status_code in (401, 403):
        return FreshBooksAuthError(message, **kwargs)
    elif status_code == 404:
        return FreshBooksNotFoundError(message, **kwargs)
    elif status_code == 429:
        return FreshBooksRateLimitError(message, **kwargs)
    elif status_code >= 500:
        return FreshBooksServerError(message, **kwargs)
    else:
        return FreshBooksHTTPError(message, **kwargs)


class Transport:
    """Sends serialized request envelopes to the API endpoint.

    One ``httpx.Client`` is reused for every request, so connections are
    pooled across calls and across paginated iterators. Pass ``http_client``
    to supply your own; it is then not closed by ``close()``.
    """

    def __init__(
        self,
        api_url: str,
        auth: TokenAuth,
        *,
        user_agent: str = ClientConfig.USER_AGENT,
        timeout: float = ClientConfig.DEFAULT_TIMEOUT,
        http_client: httpx.Client | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            api_url: Account API endpoint, e.g. https://sample.freshbooks.com/api/2.1/xml-in
            auth: Authentication handler
            user_agent: User-Agent header value
            timeout: Request timeout in seconds
            http_client: Optional pre-configured httpx client
            rate_limiter: Optional client-side throttle
        """
        self.api_url = api_url
        self.auth = auth
        self.rate_limiter = rate_limiter
        self._owns_client = http_client is None
        self.client = http_client or httpx.Client(
            timeout=timeout,
            follow_redirects=False,
            headers={"User-Agent": user_agent},
        )

    def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            self.client.close()

    def send(self, payload: bytes) -> bytes:
        """POST one request envelope and return the response body.

        Args:
            payload: Serialized request

        Returns:
            Raw response body

        Raises:
            FreshBooksTransportError: If the server could not be reached
            FreshBooksHTTPError: If the server answered with an error status
        """
        if self.rate_limiter is not None:
            self.rate_limiter.acquire()

        headers = self.auth.get_headers()
        headers["Content-Type"] = ClientConfig.CONTENT_TYPE

        try:
            response = self.client.post(
                self.api_url,
                content=payload,
                headers=headers,
                follow_redirects=False,
            )
        except httpx.TransportError as e:
            raise FreshBooksTransportError(
                f"Request to {self.api_url} failed: {e}"
            ) from e

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "POST %s %s yields %s: %s",
                self.api_url,
                payload.decode("utf-8", errors="replace"),
                response.status_code,
                response.text,
            )

        # Redirects usually mean a wrong account URL
        if response.status_code >= 400 or response.is_redirect:
            raise parse_error_response(response)

        return response.content
