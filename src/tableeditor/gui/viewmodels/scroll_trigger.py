"""Translate scroll geometry into "load the next page" requests."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from tableeditor.config import SCROLL_THRESHOLD_PX
from tableeditor.domain.models.core import Page

LOGGER = logging.getLogger(__name__)


class IncrementalLoader(Protocol):
    @property
    def can_fetch(self) -> bool: ...

    async def fetch_next(self) -> Optional[Page]: ...


def is_near_bottom(
    scroll_top: float,
    client_height: float,
    scroll_height: float,
    threshold: float = SCROLL_THRESHOLD_PX,
) -> bool:
    return scroll_top + client_height >= scroll_height - threshold


class ScrollTrigger:
    """The only place incremental loading is requested from."""

    def __init__(self, loader: IncrementalLoader, threshold: float = SCROLL_THRESHOLD_PX) -> None:
        self._loader = loader
        self._threshold = threshold

    @property
    def threshold(self) -> float:
        return self._threshold

    def should_fetch(self, near_bottom: bool) -> bool:
        return near_bottom and self._loader.can_fetch

    async def notify(self, near_bottom: bool) -> Optional[Page]:
        if not self.should_fetch(near_bottom):
            return None
        LOGGER.debug("Near bottom, requesting next page")
        return await self._loader.fetch_next()

    async def notify_geometry(
        self, scroll_top: float, client_height: float, scroll_height: float
    ) -> Optional[Page]:
        near = is_near_bottom(scroll_top, client_height, scroll_height, self._threshold)
        return await self.notify(near)
