import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Type


@dataclass(kw_only=True)
class Event:
    """Base event class."""
    timestamp: datetime = field(default_factory=datetime.now)
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass
class Subscription:
    """Handle returned by subscribe(); can be used to unsubscribe."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    event_type: Type = Event
    handler: Callable = field(default=lambda e: None)
    active: bool = True

    def cancel(self):
        self.active = False


class EventBus:
    """Synchronous publish/subscribe hub.

    The engine runs on a single event-loop thread, so handlers are invoked
    inline in subscription order.  A failing handler is logged and does not
    stop delivery to the remaining subscribers.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)
        self._handlers: Dict[Type, List[Subscription]] = defaultdict(list)

    def subscribe(self, event_type: Type, handler: Callable) -> Subscription:
        sub = Subscription(event_type=event_type, handler=handler)
        self._handlers[event_type].append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription):
        subscription.active = False
        subs = self._handlers.get(subscription.event_type, [])
        if subscription in subs:
            subs.remove(subscription)

    def publish(self, event) -> int:
        """Deliver *event* to every active subscriber of its exact type.

        Returns the number of handlers that ran without raising.
        """
        event_type = type(event)
        delivered = 0
        for sub in list(self._handlers[event_type]):
            if not sub.active:
                continue
            try:
                sub.handler(event)
            except Exception as e:
                self._logger.error("Handler failed for %s: %s", event_type.__name__, e)
                continue
            delivered += 1
        return delivered

    def subscriber_count(self, event_type: Type) -> int:
        return sum(1 for sub in self._handlers.get(event_type, []) if sub.active)
