"""Reference data source that pages through an in-memory payload."""

from __future__ import annotations

import asyncio
from typing import Any, Optional, Sequence

from tableeditor.config import PAGE_SIZE
from tableeditor.domain.models.core import Page
from tableeditor.infrastructure.sources.records import normalize_record


def slice_page(
    records: Sequence[Any],
    cursor: int,
    page_size: int,
    seed: Optional[int] = None,
) -> Page:
    """Cut page *cursor* out of *records*.

    ``next_cursor`` is ``cursor + 1`` while records remain past this page.
    """

    if cursor < 0:
        raise ValueError(f"cursor must be non-negative, got {cursor}")
    start = cursor * page_size
    end = start + page_size
    rows = tuple(
        normalize_record(item, start + offset, seed)
        for offset, item in enumerate(records[start:end])
    )
    return Page(rows=rows, next_cursor=cursor + 1 if end < len(records) else None)


class InMemoryPageSource:
    """Serve pages of a fixed record list.

    *delay* simulates network latency; the fetch still yields to the event
    loop when it is zero.
    """

    def __init__(
        self,
        records: Sequence[Any],
        page_size: int = PAGE_SIZE,
        seed: Optional[int] = None,
        delay: float = 0.0,
    ) -> None:
        self._records = list(records)
        self._page_size = page_size
        self._seed = seed
        self._delay = delay
        self.requests: list[int] = []

    @property
    def total(self) -> int:
        return len(self._records)

    async def fetch_page(self, cursor: int) -> Page:
        self.requests.append(cursor)
        await asyncio.sleep(self._delay)
        return slice_page(self._records, cursor, self._page_size, self._seed)
