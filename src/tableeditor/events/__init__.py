from .bus import Event, EventBus, Subscription
from .domain_events import DomainEvent
from .table_events import (
    PageLoadedEvent,
    RowAddedEvent,
    RowEditedEvent,
    RowsResetEvent,
)

__all__ = [
    "DomainEvent",
    "Event",
    "EventBus",
    "PageLoadedEvent",
    "RowAddedEvent",
    "RowEditedEvent",
    "RowsResetEvent",
    "Subscription",
]
