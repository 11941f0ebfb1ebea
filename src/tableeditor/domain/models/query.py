from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .core import canonical_field


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


@dataclass(frozen=True)
class ViewQuery:
    """Filter and sort settings the view pipeline is evaluated against."""

    filter_text: str = ""
    sort_field: Optional[str] = None
    sort_direction: SortDirection = SortDirection.ASC

    def with_filter(self, text: Optional[str]) -> ViewQuery:
        return replace(self, filter_text=text or "")

    def with_sort(self, field_name: Optional[str], direction: SortDirection = SortDirection.ASC) -> ViewQuery:
        if field_name is None:
            return replace(self, sort_field=None, sort_direction=SortDirection.ASC)
        return replace(self, sort_field=canonical_field(field_name), sort_direction=direction)

    def toggled_sort(self, field_name: str) -> ViewQuery:
        """Flip the direction for the active field, otherwise sort *field_name* ascending."""

        canonical = canonical_field(field_name)
        if canonical == self.sort_field:
            return replace(self, sort_direction=self.sort_direction.flipped())
        return replace(self, sort_field=canonical, sort_direction=SortDirection.ASC)
