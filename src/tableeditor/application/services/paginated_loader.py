"""Cursor-driven incremental page loader.

Pulls pages from a :class:`PageSource` one at a time and appends them to a
:class:`RowStore`.  Only one request is ever in flight; results belonging to
an older generation (issued before a :meth:`Paginator.retry`) are dropped.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Protocol

from tableeditor.application.services.row_store import RowStore
from tableeditor.config import PAGE_SIZE
from tableeditor.domain.models.core import Page
from tableeditor.errors import FetchError
from tableeditor.gui.viewmodels.signal import Signal

LOGGER = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE: int = PAGE_SIZE
INITIAL_CURSOR: int = 0


class PageSource(Protocol):
    """Minimal protocol for the external data source.

    The source alone decides what the integer cursor means.
    """

    async def fetch_page(self, cursor: int) -> Page: ...


class PaginationStatus(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    ERRORED = "errored"
    EXHAUSTED = "exhausted"


class Paginator:
    """Stateful page loader.

    State machine::

        IDLE --fetch_next--> FETCHING --ok, cursor--> IDLE
                                      --ok, no cursor--> EXHAUSTED
                                      --failure--> ERRORED
        any --retry--> FETCHING (rows discarded, cursor 0)
    """

    def __init__(
        self,
        source: PageSource,
        store: Optional[RowStore] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._source = source
        self._store = store if store is not None else RowStore()
        self._page_size = page_size

        # State
        self._cursor: int = INITIAL_CURSOR
        self._exhausted: bool = False
        self._in_flight: bool = False
        self._error: Optional[FetchError] = None
        self._generation: int = 0
        self._pages_loaded: int = 0

        self.page_loaded = Signal()  # emits (Page)
        self.status_changed = Signal()  # emits (PaginationStatus)
        self.reset_performed = Signal()  # emits (discarded row count)

    # -- properties --------------------------------------------------------

    @property
    def store(self) -> RowStore:
        return self._store

    @property
    def cursor(self) -> int:
        """Cursor the next :meth:`fetch_next` will request."""
        return self._cursor

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def error(self) -> Optional[FetchError]:
        return self._error

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pages_loaded(self) -> int:
        return self._pages_loaded

    @property
    def status(self) -> PaginationStatus:
        if self._in_flight:
            return PaginationStatus.FETCHING
        if self._error is not None:
            return PaginationStatus.ERRORED
        if self._exhausted:
            return PaginationStatus.EXHAUSTED
        return PaginationStatus.IDLE

    @property
    def can_fetch(self) -> bool:
        return not (self._in_flight or self._exhausted or self._error is not None)

    # -- public API --------------------------------------------------------

    async def fetch_next(self) -> Optional[Page]:
        """Fetch the page at the current cursor and append it.

        Returns the page, or ``None`` when nothing was fetched: a request is
        already running, the source is exhausted, the last attempt failed
        (use :meth:`retry`), or the result went stale during a retry.
        """
        if not self.can_fetch:
            LOGGER.debug(
                "fetch_next ignored (status=%s, cursor=%s)", self.status.value, self._cursor
            )
            return None
        return await self._fetch(self._cursor)

    async def retry(self) -> Optional[Page]:
        """Discard every fetched row and start over from the first cursor."""
        self._generation += 1
        discarded = self._store.reset()
        self._cursor = INITIAL_CURSOR
        self._exhausted = False
        self._error = None
        self._in_flight = False
        self._pages_loaded = 0
        LOGGER.info(
            "Retrying from cursor %s (generation %s, %s rows discarded)",
            INITIAL_CURSOR,
            self._generation,
            discarded,
        )
        self.reset_performed.emit(discarded)
        return await self._fetch(self._cursor)

    # -- internal ----------------------------------------------------------

    async def _fetch(self, cursor: int) -> Optional[Page]:
        generation = self._generation
        self._in_flight = True
        self._notify()
        try:
            page = await self._source.fetch_page(cursor)
        except Exception as exc:
            if generation != self._generation:
                LOGGER.debug("Dropping stale failure for cursor %s: %s", cursor, exc)
                return None
            self._error = exc if isinstance(exc, FetchError) else FetchError(str(exc))
            if self._error is not exc:
                self._error.__cause__ = exc
            LOGGER.error("Failed to fetch page at cursor %s: %s", cursor, exc)
            return None
        else:
            if generation != self._generation:
                LOGGER.debug(
                    "Dropping stale page for cursor %s (generation %s != %s)",
                    cursor,
                    generation,
                    self._generation,
                )
                return None
            added = self._store.append(page.rows)
            self._pages_loaded += 1
            if page.next_cursor is None:
                self._exhausted = True
            else:
                self._cursor = page.next_cursor
            LOGGER.info(
                "Loaded page %s: %s rows (%s total), next cursor %s",
                cursor,
                added,
                len(self._store),
                page.next_cursor,
            )
            self.page_loaded.emit(page)
            return page
        finally:
            if generation == self._generation:
                self._in_flight = False
                self._notify()

    def _notify(self) -> None:
        self.status_changed.emit(self.status)
