"""Modal cell-edit cursor: at most one cell is open for editing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from tableeditor.config import EDITABLE_FIELDS
from tableeditor.domain.models.core import canonical_field
from tableeditor.errors import FieldNotEditableError
from tableeditor.gui.viewmodels.signal import Signal

COMMIT_KEYS = frozenset({"Enter", "Return"})
CANCEL_KEYS = frozenset({"Escape"})


@dataclass(frozen=True)
class CellRef:
    row_id: str
    field: str


@dataclass(frozen=True)
class CommittedEdit:
    row_id: str
    field: str
    value: str


class EditSession:
    """Hold the cell being edited and its in-progress text.

    Nothing here touches the overlay: :meth:`commit` hands back the value and
    the caller decides where it goes.  Cancelling simply forgets the text.
    """

    def __init__(self) -> None:
        self._cell: Optional[CellRef] = None
        self._value: str = ""
        self.cursor_changed = Signal()  # emits (CellRef | None)

    @property
    def cell(self) -> Optional[CellRef]:
        return self._cell

    @property
    def value(self) -> str:
        return self._value

    @property
    def active(self) -> bool:
        return self._cell is not None

    def is_editing(self, row_id: str, field_name: str) -> bool:
        return self._cell is not None and self._cell == CellRef(row_id, canonical_field(field_name))

    def begin(self, row_id: str, field_name: str, current_value: str = "") -> CellRef:
        canonical = canonical_field(field_name)
        if canonical not in EDITABLE_FIELDS:
            raise FieldNotEditableError(f"field {field_name!r} is read-only")
        self._cell = CellRef(row_id, canonical)
        self._value = current_value or ""
        self.cursor_changed.emit(self._cell)
        return self._cell

    def update(self, value: str) -> None:
        if self._cell is not None:
            self._value = value

    def commit(self) -> Optional[CommittedEdit]:
        if self._cell is None:
            return None
        edit = CommittedEdit(self._cell.row_id, self._cell.field, self._value)
        self._clear()
        return edit

    def cancel(self) -> bool:
        if self._cell is None:
            return False
        self._clear()
        return True

    def handle_key(self, key: str) -> Optional[CommittedEdit]:
        """Enter commits, Escape cancels; other keys are ignored."""
        if key in COMMIT_KEYS:
            return self.commit()
        if key in CANCEL_KEYS:
            self.cancel()
        return None

    def _clear(self) -> None:
        self._cell = None
        self._value = ""
        self.cursor_changed.emit(None)
