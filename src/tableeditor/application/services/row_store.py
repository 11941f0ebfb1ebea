"""Append-only storage for rows fetched from the data source."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from tableeditor.domain.models.core import Row

LOGGER = logging.getLogger(__name__)


class RowStore:
    """Ordered rows with unique ids.

    Rows are appended page by page and never mutated; the only way to drop
    them is :meth:`reset`.
    """

    def __init__(self) -> None:
        self._rows: List[Row] = []
        self._index: Dict[str, int] = {}

    def append(self, rows: Iterable[Row]) -> int:
        """Append *rows* in order and return how many were stored.

        A row whose id is already stored is skipped so ids stay unique.
        """

        added = 0
        for row in rows:
            if row.id in self._index:
                LOGGER.warning("Skipping duplicate row id %r", row.id)
                continue
            self._index[row.id] = len(self._rows)
            self._rows.append(row)
            added += 1
        return added

    def reset(self) -> int:
        """Drop every row and return how many were discarded."""

        discarded = len(self._rows)
        self._rows.clear()
        self._index.clear()
        return discarded

    def get(self, row_id: str) -> Optional[Row]:
        position = self._index.get(row_id)
        return self._rows[position] if position is not None else None

    @property
    def rows(self) -> tuple[Row, ...]:
        return tuple(self._rows)

    def ids(self) -> List[str]:
        return [row.id for row in self._rows]

    def __contains__(self, row_id: object) -> bool:
        return row_id in self._index

    def __iter__(self) -> Iterator[Row]:
        return iter(tuple(self._rows))

    def __len__(self) -> int:
        return len(self._rows)
