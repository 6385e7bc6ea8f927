"""Exceptions for the FreshBooksPy library."""

from __future__ import annotations

import httpx


class FreshBooksError(Exception):
    """Base exception for all FreshBooksPy errors."""


class FreshBooksTransportError(FreshBooksError):
    """Raised when the API server could not be reached.

    Covers connection failures, DNS and TLS problems and timeouts. The
    underlying ``httpx.TransportError`` is available as ``__cause__``.
    """


class FreshBooksDecodeError(FreshBooksError):
    """Raised when a response payload is malformed or not what was expected."""

    def __init__(self, message: str, payload: bytes | None = None) -> None:
        super().__init__(message)
        self.payload = payload


class FreshBooksAPIError(FreshBooksError):
    """Raised when the service answers with a ``status="fail"`` envelope.

    The request reached the service and was rejected, e.g. an unknown id or a
    validation error. Not retried.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        field: str | None = None,
    ) -> None:
        """Initialize FreshBooksAPIError.

        Args:
            message: Error message reported by the service
            code: Service error code, when reported
            field: Name of the offending request field, when reported
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.field = field

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class FreshBooksFetchError(FreshBooksError):
    """Raised by a paginated iterator when fetching a follow-up page fails.

    The original exception is chained as ``__cause__``. The iterator keeps its
    position, so calling ``next()`` again retries the same page.
    """

    def __init__(self, page: int, cause: BaseException) -> None:
        super().__init__(f"Failed to fetch page {page}: {cause}")
        self.page = page
        self.cause = cause


class FreshBooksExhaustedError(StopIteration):
    """Raised by a paginated iterator when no items remain.

    This is the normal end of a sequence, not a fault. It subclasses
    ``StopIteration`` so ``for`` loops end cleanly, and sits outside
    the ``FreshBooksError`` hierarchy.
    """


class FreshBooksHTTPError(FreshBooksError, httpx.HTTPStatusError):
    """Raised when the API server answers with an HTTP error status.

    Extends httpx.HTTPStatusError so users can catch both FreshBooksHTTPError
    and httpx.HTTPStatusError.
    """

    def __init__(
        self,
        message: str,
        *,
        request: httpx.Request,
        response: httpx.Response,
    ) -> None:
        httpx.HTTPStatusError.__init__(
            self, message, request=request, response=response
        )
        self.message = message
        self.status_code = response.status_code

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"[{self.status_code}] {self.message}"


class FreshBooksAuthError(FreshBooksHTTPError):
    """Raised when authentication fails (401/403)."""

    pass


class FreshBooksNotFoundError(FreshBooksHTTPError):
    """Raised when the API endpoint is not found (404)."""

    pass


class FreshBooksRateLimitError(FreshBooksHTTPError):
    """Raised when the service throttles requests (429)."""

    pass


class FreshBooksServerError(FreshBooksHTTPError):
    """Raised when the server encounters an error (5xx)."""

    pass
