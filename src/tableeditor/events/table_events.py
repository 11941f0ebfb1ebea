from dataclasses import dataclass
from typing import Optional

from .domain_events import DomainEvent


@dataclass(frozen=True)
class PageLoadedEvent(DomainEvent):
    cursor: int = 0
    row_count: int = 0
    next_cursor: Optional[int] = None


@dataclass(frozen=True)
class RowsResetEvent(DomainEvent):
    discarded_rows: int = 0


@dataclass(frozen=True)
class RowEditedEvent(DomainEvent):
    row_id: str = ""
    field: str = ""
    value: str = ""


@dataclass(frozen=True)
class RowAddedEvent(DomainEvent):
    row_id: str = ""
