"""HTTP data sources built on ``requests``.

Blocking calls are moved off the event loop with :func:`asyncio.to_thread`
so edits and filtering stay responsive while a page downloads.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional

import requests

from tableeditor.config import HTTP_TIMEOUT_SEC, PAGE_SIZE
from tableeditor.domain.models.core import Page
from tableeditor.errors import FetchError
from tableeditor.infrastructure.sources.memory_source import slice_page
from tableeditor.infrastructure.sources.records import normalize_record

LOGGER = logging.getLogger(__name__)


def _get_json(session: requests.Session, url: str, timeout: float, params: Optional[dict] = None) -> Any:
    try:
        response = session.get(url, params=params, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(f"Failed to fetch data: {exc}") from exc
    try:
        return response.json()
    except ValueError as exc:
        raise FetchError(f"Invalid JSON from {url}: {exc}") from exc


class HttpPageSource:
    """Server-side paging: ``GET <url>?page=<cursor>&limit=<page_size>``.

    The response may be a bare JSON list (a short page means the end) or an
    object carrying ``rows``/``data`` and ``nextCursor``.
    """

    def __init__(
        self,
        url: str,
        page_size: int = PAGE_SIZE,
        timeout: float = HTTP_TIMEOUT_SEC,
        session: Optional[requests.Session] = None,
        seed: Optional[int] = None,
    ) -> None:
        self._url = url
        self._page_size = page_size
        self._timeout = timeout
        self._session = session or requests.Session()
        self._seed = seed

    async def fetch_page(self, cursor: int) -> Page:
        return await asyncio.to_thread(self._fetch_page_sync, cursor)

    def _fetch_page_sync(self, cursor: int) -> Page:
        params = {"page": cursor, "limit": self._page_size}
        LOGGER.debug("GET %s %s", self._url, params)
        payload = _get_json(self._session, self._url, self._timeout, params)
        if isinstance(payload, list):
            records = payload
            next_cursor = cursor + 1 if len(records) >= self._page_size else None
        elif isinstance(payload, dict):
            records = payload.get("rows", payload.get("data"))
            if not isinstance(records, list):
                raise FetchError(f"response for page {cursor} has no row list")
            raw_next = payload.get("nextCursor")
            next_cursor = int(raw_next) if raw_next is not None else None
        else:
            raise FetchError(f"unexpected payload type {type(payload).__name__}")
        start = cursor * self._page_size
        rows = tuple(
            normalize_record(item, start + offset, self._seed)
            for offset, item in enumerate(records[: self._page_size])
        )
        return Page(rows=rows, next_cursor=next_cursor)


class SnapshotPageSource:
    """Download a whole JSON array once, then page through it locally."""

    def __init__(
        self,
        url: str,
        page_size: int = PAGE_SIZE,
        timeout: float = HTTP_TIMEOUT_SEC,
        session: Optional[requests.Session] = None,
        seed: Optional[int] = None,
    ) -> None:
        self._url = url
        self._page_size = page_size
        self._timeout = timeout
        self._session = session or requests.Session()
        self._seed = seed
        self._records: Optional[List[Any]] = None

    def invalidate(self) -> None:
        """Forget the cached payload so the next fetch downloads it again."""
        self._records = None

    async def fetch_page(self, cursor: int) -> Page:
        if self._records is None:
            self._records = await asyncio.to_thread(self._download)
        return slice_page(self._records, cursor, self._page_size, self._seed)

    def _download(self) -> List[Any]:
        LOGGER.info("Downloading snapshot from %s", self._url)
        payload = _get_json(self._session, self._url, self._timeout)
        if not isinstance(payload, list):
            raise FetchError(f"snapshot at {self._url} is not a JSON array")
        return payload
