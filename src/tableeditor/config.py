"""Default configuration values for tableeditor."""

from __future__ import annotations

from typing import Final

# Rows requested per ``fetch_page`` call.  Sources interpret the cursor, the
# engine only forwards it.
PAGE_SIZE: Final[int] = 50

# Distance in pixels from the bottom of the scroll area that counts as
# "near the end" for incremental loading.
SCROLL_THRESHOLD_PX: Final[int] = 100

# Fallback values for records that arrive without a language/state.
LANGUAGE_CHOICES: Final[tuple[str, ...]] = ("English", "Spanish", "French", "German")
STATE_CHOICES: Final[tuple[str, ...]] = ("CA", "NY", "TX", "FL", "IL")

DEFAULT_CREATED_DATE: Final[str] = "2020-05-04 09:18:16"
CREATED_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Locally created rows are keyed ``new-<millis>``.  Source ids never carry
# this prefix (they fall back to ``row-<index>``).
NEW_ROW_PREFIX: Final[str] = "new-"
SOURCE_ROW_PREFIX: Final[str] = "row-"

NEW_ROW_DEFAULTS: Final[dict[str, str]] = {
    "name": "",
    "address": "",
    "language": "English",
    "version": "new customer",
    "state": "",
}

# Cells the edit cursor may open.  ``id``, ``version`` and ``created_date`` are
# display only.
EDITABLE_FIELDS: Final[frozenset[str]] = frozenset({"name", "address", "language", "state"})

EMPTY_CELL_PLACEHOLDER: Final[str] = "Click to edit"

HTTP_TIMEOUT_SEC: Final[float] = 30.0
