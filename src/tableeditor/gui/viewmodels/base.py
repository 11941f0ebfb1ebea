"""BaseViewModel: pure Python, no Qt dependency.

Tracks ``EventBus`` subscriptions and signal connections so that concrete
ViewModels can release them in one call to ``dispose()``.
"""

from __future__ import annotations

from typing import Callable, Type

from tableeditor.events.bus import EventBus, Subscription
from tableeditor.gui.viewmodels.signal import Signal


class BaseViewModel:
    """ViewModel base class: pure Python, no Qt dependency."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []
        self._connections: list[tuple[Signal, Callable]] = []

    def subscribe_event(
        self,
        event_bus: EventBus,
        event_type: Type,
        handler: Callable,
    ) -> Subscription:
        """Subscribe to an event type and track the subscription."""
        sub = event_bus.subscribe(event_type, handler)
        self._subscriptions.append(sub)
        return sub

    def track_connection(self, signal: Signal, handler: Callable) -> None:
        """Connect *handler* to *signal* and disconnect it on dispose."""
        signal.connect(handler)
        self._connections.append((signal, handler))

    def dispose(self) -> None:
        """Cancel tracked subscriptions and drop tracked connections."""
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions.clear()
        for signal, handler in self._connections:
            if handler in signal._handlers:
                signal.disconnect(handler)
        self._connections.clear()
