"""Merge -> filter -> sort derivation of the rows handed to the view.

Every function here is pure: inputs are never mutated and the result is a
fresh tuple, so callers can recompute on each state change.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Tuple

from tableeditor.domain.models.core import Patch, Row, canonical_field
from tableeditor.domain.models.query import SortDirection, ViewQuery
from tableeditor.domain.services.collation import collation_key


def merge_rows(rows: Iterable[Row], patches: Mapping[str, Patch]) -> Tuple[Row, ...]:
    """Overlay *patches* on *rows*, then append locally created rows.

    Stored rows keep their order.  Every patch whose id has no stored row follows
    as an overlay-only row (``is_new`` set) in the order the patches were created.
    After a reload this includes edits to source rows that have not been fetched
    again yet.
    """

    merged = []
    seen = set()
    for row in rows:
        seen.add(row.id)
        patch = patches.get(row.id)
        merged.append(patch.apply(row) if patch is not None else row)
    for row_id, patch in patches.items():
        if row_id not in seen:
            merged.append(patch.as_row())
    return tuple(merged)


def row_matches(row: Row, needle: str) -> bool:
    """Case-insensitive substring test across every field of *row*."""

    return any(needle in text.casefold() for text in row.searchable_texts())


def filter_rows(rows: Iterable[Row], text: Optional[str]) -> Tuple[Row, ...]:
    if not text:
        return tuple(rows)
    needle = text.casefold()
    return tuple(row for row in rows if row_matches(row, needle))


def sort_rows(
    rows: Iterable[Row],
    field_name: Optional[str],
    direction: SortDirection = SortDirection.ASC,
) -> Tuple[Row, ...]:
    if field_name is None:
        return tuple(rows)
    canonical = canonical_field(field_name)
    # ``sorted`` is stable in both directions: equal keys keep input order
    # even with ``reverse=True``.
    return tuple(
        sorted(
            rows,
            key=lambda row: collation_key(row.text(canonical)),
            reverse=direction is SortDirection.DESC,
        )
    )


def build_view(
    rows: Iterable[Row],
    patches: Mapping[str, Patch],
    query: ViewQuery,
) -> Tuple[Row, ...]:
    merged = merge_rows(rows, patches)
    visible = filter_rows(merged, query.filter_text)
    return sort_rows(visible, query.sort_field, query.sort_direction)
