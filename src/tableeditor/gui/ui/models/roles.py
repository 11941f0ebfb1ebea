"""Role definitions shared by the table models."""

from __future__ import annotations

from enum import IntEnum
from typing import Dict

from PySide6.QtCore import Qt


class Roles(IntEnum):
    """Custom roles exposed to QML or widgets."""

    ROW_ID = Qt.UserRole + 1
    IS_NEW = Qt.UserRole + 2
    IS_EDITED = Qt.UserRole + 3
    IS_SELECTED = Qt.UserRole + 4
    RAW_VALUE = Qt.UserRole + 5


def role_names(base: Dict[int, bytes] | None = None) -> Dict[int, bytes]:
    """Return a mapping of Qt role numbers to byte names."""

    mapping: Dict[int, bytes] = {} if base is None else dict(base)
    mapping.update(
        {
            Roles.ROW_ID: b"rowId",
            Roles.IS_NEW: b"isNew",
            Roles.IS_EDITED: b"isEdited",
            Roles.IS_SELECTED: b"isSelected",
            Roles.RAW_VALUE: b"rawValue",
        }
    )
    return mapping
