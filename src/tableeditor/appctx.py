"""Wiring helpers that build data sources and view models from settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from .application.services.paginated_loader import PageSource
from .errors import SourceUnavailableError
from .errors.handler import ErrorHandler
from .events.bus import EventBus
from .gui.viewmodels.table_editor_viewmodel import TableEditorViewModel
from .infrastructure.sources import HttpPageSource, InMemoryPageSource, SnapshotPageSource
from .settings.manager import SettingsManager
from .utils.jsonio import read_json

LOGGER = logging.getLogger(__name__)


def _is_url(target: str) -> bool:
    return target.startswith(("http://", "https://"))


def build_source(
    settings: SettingsManager,
    target: Optional[str] = None,
    *,
    page_size: Optional[int] = None,
    seed: Optional[int] = None,
) -> PageSource:
    """Return a page source for *target* (URL or JSON file path).

    Without *target* the configured ``source.url`` is used.
    """

    target = target or settings.get("source.url")
    if not target:
        raise SourceUnavailableError("no data source given and source.url is not configured")
    page_size = page_size or settings.get("paging.page_size")
    seed = seed if seed is not None else settings.get("source.fallback_seed")

    if _is_url(target):
        timeout = settings.get("source.timeout_sec")
        if settings.get("source.mode") == "snapshot":
            LOGGER.debug("Using snapshot source for %s", target)
            return SnapshotPageSource(target, page_size=page_size, timeout=timeout, seed=seed)
        LOGGER.debug("Using paged HTTP source for %s", target)
        return HttpPageSource(target, page_size=page_size, timeout=timeout, seed=seed)

    path = Path(target)
    try:
        records: Any = read_json(path)
    except (OSError, ValueError) as exc:
        raise SourceUnavailableError(f"cannot read {path}: {exc}") from exc
    if not isinstance(records, list):
        raise SourceUnavailableError(f"{path} must contain a JSON array of records")
    LOGGER.debug("Loaded %d records from %s", len(records), path)
    return InMemoryPageSource(records, page_size=page_size, seed=seed)


def build_view_model(
    settings: SettingsManager,
    source: PageSource,
    *,
    page_size: Optional[int] = None,
    event_bus: Optional[EventBus] = None,
    error_handler: Optional[ErrorHandler] = None,
) -> TableEditorViewModel:
    bus = event_bus or EventBus()
    return TableEditorViewModel(
        source,
        page_size=page_size or settings.get("paging.page_size"),
        scroll_threshold=settings.get("paging.scroll_threshold_px"),
        event_bus=bus,
        error_handler=error_handler or ErrorHandler(logging.getLogger("tableeditor.errors"), bus),
    )
