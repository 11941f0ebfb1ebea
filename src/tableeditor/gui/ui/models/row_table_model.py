"""Qt item model exposing :class:`TableEditorViewModel` rows to views."""

from __future__ import annotations

import logging
from typing import Any, Optional

from PySide6.QtCore import QAbstractTableModel, QModelIndex, QObject, Qt

from tableeditor.config import EDITABLE_FIELDS, EMPTY_CELL_PLACEHOLDER
from tableeditor.domain.models.query import SortDirection
from tableeditor.errors import DomainError
from tableeditor.gui.ui.models.columns import COLUMNS
from tableeditor.gui.ui.models.roles import Roles, role_names
from tableeditor.gui.viewmodels.table_editor_viewmodel import TableEditorViewModel

_LOGGER = logging.getLogger(__name__)

_PLACEHOLDER_FIELDS = frozenset({"name", "address"})


def _is_checked(value: Any) -> bool:
    if isinstance(value, Qt.CheckState):
        return value == Qt.CheckState.Checked
    return int(value) == Qt.CheckState.Checked.value


class RowTableModel(QAbstractTableModel):
    """Read the view model's derived rows; forward edits and sorting back."""

    def __init__(self, view_model: TableEditorViewModel, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._vm = view_model
        self._rows = view_model.view_rows()
        # Released by view_model.dispose() when the view is torn down.
        view_model.track_connection(view_model.rows_changed, self._on_rows_changed)
        view_model.track_connection(view_model.selection_changed, self._on_selection_changed)
        view_model.track_connection(view_model.sort_field.changed, self._on_sort_changed)
        view_model.track_connection(view_model.sort_direction.changed, self._on_sort_changed)

    def rowCount(self, parent=QModelIndex()) -> int:  # type: ignore[override]
        if parent.isValid():
            return 0
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:  # type: ignore[override]
        if parent.isValid():
            return 0
        return len(COLUMNS)

    def field_at(self, column: int) -> str:
        return COLUMNS[column][0]

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:  # type: ignore[override]
        if not index.isValid() or not 0 <= index.row() < len(self._rows):
            return None
        row = self._rows[index.row()]
        field_name = self.field_at(index.column())
        role_int = int(role)

        if role_int == Qt.ItemDataRole.DisplayRole:
            text = row.text(field_name)
            if not text and field_name in _PLACEHOLDER_FIELDS:
                return EMPTY_CELL_PLACEHOLDER
            return text
        if role_int == Qt.ItemDataRole.EditRole:
            return row.text(field_name)
        if role_int == Qt.ItemDataRole.CheckStateRole and index.column() == 0:
            selected = self._vm.is_selected(row.id)
            return Qt.CheckState.Checked if selected else Qt.CheckState.Unchecked
        if role_int == Roles.ROW_ID:
            return row.id
        if role_int == Roles.IS_NEW:
            return row.is_new
        if role_int == Roles.IS_EDITED:
            return row.is_edited
        if role_int == Roles.IS_SELECTED:
            return self._vm.is_selected(row.id)
        if role_int == Roles.RAW_VALUE:
            return row.value(field_name)
        return None

    def setData(self, index: QModelIndex, value: Any, role: int = Qt.ItemDataRole.EditRole) -> bool:  # type: ignore[override]
        if not index.isValid():
            return False
        row = self._rows[index.row()]
        role_int = int(role)
        if role_int == Qt.ItemDataRole.CheckStateRole and index.column() == 0:
            if _is_checked(value) != self._vm.is_selected(row.id):
                self._vm.toggle_select(row.id)
            return True
        if role_int != Qt.ItemDataRole.EditRole:
            return False
        field_name = self.field_at(index.column())
        if field_name not in EDITABLE_FIELDS:
            return False
        try:
            self._vm.commit_edit(row.id, field_name, "" if value is None else str(value))
        except DomainError as exc:
            _LOGGER.warning("Rejected edit on %s.%s: %s", row.id, field_name, exc)
            return False
        return True

    def flags(self, index: QModelIndex) -> Qt.ItemFlag:  # type: ignore[override]
        if not index.isValid():
            return Qt.ItemFlag.NoItemFlags
        flags = Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable
        if index.column() == 0:
            flags |= Qt.ItemFlag.ItemIsUserCheckable
        if self.field_at(index.column()) in EDITABLE_FIELDS:
            flags |= Qt.ItemFlag.ItemIsEditable
        return flags

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole) -> Any:  # type: ignore[override]
        if orientation != Qt.Orientation.Horizontal or int(role) != Qt.ItemDataRole.DisplayRole:
            return None
        if not 0 <= section < len(COLUMNS):
            return None
        field_name, title = COLUMNS[section]
        if field_name == self._vm.sort_field.value:
            arrow = "▲" if self._vm.sort_direction.value is SortDirection.ASC else "▼"
            return f"{title} {arrow}"
        return title

    def sort(self, column: int, order: Qt.SortOrder = Qt.SortOrder.AscendingOrder) -> None:  # type: ignore[override]
        direction = SortDirection.DESC if order == Qt.SortOrder.DescendingOrder else SortDirection.ASC
        self._vm.set_sort(self.field_at(column), direction)

    def roleNames(self):  # type: ignore[override]
        return role_names(super().roleNames())

    def _on_rows_changed(self, rows) -> None:
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()

    def _on_sort_changed(self, _new, _old) -> None:
        self.headerDataChanged.emit(Qt.Orientation.Horizontal, 0, len(COLUMNS) - 1)

    def _on_selection_changed(self, _ids) -> None:
        if not self._rows:
            return
        top = self.index(0, 0)
        bottom = self.index(len(self._rows) - 1, 0)
        self.dataChanged.emit(top, bottom, [Qt.ItemDataRole.CheckStateRole, int(Roles.IS_SELECTED)])
