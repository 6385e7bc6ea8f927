"""Lazy iteration over paginated API listings."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

from freshbookspy.exceptions import FreshBooksExhaustedError, FreshBooksFetchError
from freshbookspy.models import Page

logger = logging.getLogger(__name__)

T = TypeVar("T")

FetchPage = Callable[[int], Page[T]]


class PaginatedIterator(Iterator[T], Generic[T]):
    """Iterator for paginated API responses.

    Wraps a ``fetch(page_number)`` callable that already has its filters and
    page size bound, and walks the listing one item at a time. The first page
    is fetched on construction so failures surface immediately; later pages
    are fetched only when the previous one is used up.

    The iterator is single-pass. Build a new one to start over.
    """

    def __init__(self, fetch: FetchPage[T]) -> None:
        """Initialize paginated iterator.

        Args:
            fetch: Callable returning the given 1-based page of the listing

        Raises:
            Whatever ``fetch(1)`` raises, unchanged
        """
        self._fetch = fetch
        self._current: Page[T] = fetch(1)
        self._index = 0
        self._exhausted = False
        logger.debug(
            "Fetched page 1 of %d (%d items)",
            self._current.pages,
            len(self._current.items),
        )

    @property
    def page(self) -> int:
        """Number of the page currently being read."""
        return self._current.page

    @property
    def pages(self) -> int:
        """Total page count as reported by the most recent page."""
        return self._current.pages

    @property
    def per_page(self) -> int | None:
        return self._current.per_page

    @property
    def total(self) -> int | None:
        return self._current.total

    def __iter__(self) -> PaginatedIterator[T]:
        """Return iterator."""
        return self

    def has_next(self) -> bool:
        """Return True if another item can be requested.

        Never fetches; calling it repeatedly gives the same answer.
        """
        if self._exhausted:
            return False
        return (
            self._index < len(self._current.items)
            or self._current.page < self._current.pages
        )

    def __next__(self) -> T:
        """Get next item, fetching the next page if needed.

        Raises:
            FreshBooksExhaustedError: When no items remain
            FreshBooksFetchError: When fetching the next page fails. The
                iterator is left as it was, so the call can be retried.
        """
        if self._index < len(self._current.items):
            item = self._current.items[self._index]
            self._index += 1
            return item

        if self._exhausted or self._current.page >= self._current.pages:
            raise FreshBooksExhaustedError

        next_page = self._current.page + 1
        try:
            page = self._fetch(next_page)
        except Exception as e:
            logger.debug("Fetching page %d failed: %s", next_page, e)
            raise FreshBooksFetchError(next_page, e) from e

        logger.debug(
            "Fetched page %d of %d (%d items)", page.page, page.pages, len(page.items)
        )
        self._current = page
        self._index = 0

        if not page.items:
            logger.warning(
                "Page %d is empty although %d pages were reported; stopping",
                next_page,
                page.pages,
            )
            self._exhausted = True
            raise FreshBooksExhaustedError

        self._index = 1
        return page.items[0]
