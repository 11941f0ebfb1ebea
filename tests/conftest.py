import asyncio
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Ensure the project sources are importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Qt model tests run headless.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from tableeditor.domain.models.core import Page  # noqa: E402
from tableeditor.infrastructure.sources.memory_source import slice_page  # noqa: E402


def make_records(total: int, **overrides: Any) -> List[Dict[str, Any]]:
    """Synthetic source records with every field populated."""
    records = []
    for i in range(total):
        record = {
            "id": f"src-{i}",
            "name": f"Person {i}",
            "address": f"{i} Main Street",
            "language": "English",
            "version": f"v{i % 3}",
            "state": "CA",
            "createdDate": "2020-05-04 09:18:16",
        }
        record.update(overrides)
        records.append(record)
    return records


class ControlledSource:
    """Page source whose requests stay pending until the test resolves them."""

    def __init__(self) -> None:
        self.calls: List[int] = []
        self._pending: List[asyncio.Future] = []

    async def fetch_page(self, cursor: int) -> Page:
        future = asyncio.get_running_loop().create_future()
        self.calls.append(cursor)
        self._pending.append(future)
        return await future

    def resolve(self, index: int, page: Page) -> None:
        self._pending[index].set_result(page)

    def fail(self, index: int, exc: BaseException) -> None:
        self._pending[index].set_exception(exc)


class FlakySource:
    """Fails the first *failures* requests, then serves *records*."""

    def __init__(self, records: List[Dict[str, Any]], failures: int = 1, page_size: int = 50,
                 exc: Optional[Exception] = None) -> None:
        self._records = records
        self._failures = failures
        self._page_size = page_size
        self._exc = exc
        self.calls: List[int] = []

    async def fetch_page(self, cursor: int) -> Page:
        self.calls.append(cursor)
        await asyncio.sleep(0)
        if self._failures > 0:
            self._failures -= 1
            raise self._exc or ConnectionError("network down")
        return slice_page(self._records, cursor, self._page_size)


async def settle() -> None:
    """Let pending tasks run until they block on their next await."""
    for _ in range(5):
        await asyncio.sleep(0)

