"""Column layout shared by the Qt model and the console renderer."""

from __future__ import annotations

# (field, header) in display order.  ``address`` is shown as the "Bio" column.
COLUMNS: tuple[tuple[str, str], ...] = (
    ("id", "ID"),
    ("address", "Bio"),
    ("name", "Name"),
    ("language", "Language"),
    ("version", "Version"),
    ("state", "State"),
    ("created_date", "Created Date"),
)
