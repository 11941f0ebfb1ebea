"""Session-local edits layered over fetched rows."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Dict, List, Mapping, Optional

from tableeditor.config import CREATED_DATE_FORMAT, NEW_ROW_DEFAULTS, NEW_ROW_PREFIX
from tableeditor.domain.models.core import Patch

LOGGER = logging.getLogger(__name__)


def _millis() -> int:
    return time.time_ns() // 1_000_000


class EditOverlay:
    """Sparse ``row id -> Patch`` mapping.

    Committing never touches the fetched rows; the view pipeline applies the
    patches at read time.  Patches are kept for the whole session, including
    across a reload of the underlying rows.
    """

    def __init__(self, clock: Callable[[], int] = _millis) -> None:
        self._patches: Dict[str, Patch] = {}
        self._clock = clock
        self._last_stamp = 0

    def commit(self, row_id: str, field_name: str, value: str) -> Patch:
        """Merge ``field_name=value`` into the patch for *row_id*."""

        current = self._patches.get(row_id) or Patch(row_id=row_id)
        patch = current.merged(field_name, "" if value is None else str(value))
        self._patches[row_id] = patch
        LOGGER.debug("Committed %s.%s", row_id, field_name)
        return patch

    def add_row(
        self,
        initial: Optional[Mapping[str, str]] = None,
        now: Optional[datetime] = None,
    ) -> str:
        """Create a locally owned row and return its id.

        The row starts from the defaults used by the editor's "Add row" action;
        *initial* overrides any of them.  ``created_date`` is stamped in UTC
        unless *now* is given.
        """

        row_id = self._next_id()
        stamp = (now or datetime.now(timezone.utc)).strftime(CREATED_DATE_FORMAT)
        patch = Patch(row_id=row_id, is_new=True)
        for name, value in {**NEW_ROW_DEFAULTS, "created_date": stamp}.items():
            patch = patch.merged(name, value, edited=False)
        for name, value in (initial or {}).items():
            patch = patch.merged(name, "" if value is None else str(value), edited=False)
        self._patches[row_id] = patch
        LOGGER.info("Added local row %s", row_id)
        return row_id

    def patch_for(self, row_id: str) -> Optional[Patch]:
        return self._patches.get(row_id)

    def patches(self) -> Mapping[str, Patch]:
        """Insertion-ordered snapshot of every patch."""

        return dict(self._patches)

    def new_row_ids(self) -> List[str]:
        return [row_id for row_id, patch in self._patches.items() if patch.is_new]

    def _next_id(self) -> str:
        # Two rows added within the same millisecond must still differ.
        stamp = max(self._clock(), self._last_stamp + 1)
        self._last_stamp = stamp
        return f"{NEW_ROW_PREFIX}{stamp}"

    def __contains__(self, row_id: object) -> bool:
        return row_id in self._patches

    def __len__(self) -> int:
        return len(self._patches)
