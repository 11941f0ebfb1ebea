"""Row selection scoped to what the view currently shows."""

from __future__ import annotations

from typing import Iterable, Set


class SelectionSet:
    """Set of selected row ids.

    Ids stay selected when a filter hides them.  "Select all" only ever covers
    the rows that are visible at the time of the call.
    """

    def __init__(self) -> None:
        self._ids: Set[str] = set()

    def toggle(self, row_id: str) -> bool:
        """Flip membership of *row_id*; returns the new state."""

        if row_id in self._ids:
            self._ids.discard(row_id)
            return False
        self._ids.add(row_id)
        return True

    def toggle_all(self, visible_ids: Iterable[str]) -> None:
        visible = list(visible_ids)
        if visible and len(self._ids) == len(visible):
            self._ids.clear()
        else:
            self._ids = set(visible)

    def all_selected(self, visible_count: int) -> bool:
        return visible_count > 0 and len(self._ids) == visible_count

    def clear(self) -> bool:
        """Empty the selection; returns whether anything was selected."""

        had_any = bool(self._ids)
        self._ids.clear()
        return had_any

    def is_selected(self, row_id: str) -> bool:
        return row_id in self._ids

    def ids(self) -> frozenset[str]:
        return frozenset(self._ids)

    def __contains__(self, row_id: object) -> bool:
        return row_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)
