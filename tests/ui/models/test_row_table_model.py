"""Tests for the Qt table adapter over TableEditorViewModel."""

from __future__ import annotations

import asyncio

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for model tests", exc_type=ImportError)

from PySide6.QtCore import QCoreApplication, Qt

from conftest import make_records
from tableeditor.domain.models.query import SortDirection
from tableeditor.gui.ui.models.columns import COLUMNS
from tableeditor.gui.ui.models.roles import Roles
from tableeditor.gui.ui.models.row_table_model import RowTableModel
from tableeditor.gui.viewmodels.table_editor_viewmodel import TableEditorViewModel
from tableeditor.infrastructure.sources.memory_source import InMemoryPageSource


@pytest.fixture(scope="module")
def qcore():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def vm(qcore):
    records = make_records(3)
    records[1]["name"] = ""
    view_model = TableEditorViewModel(InMemoryPageSource(records))
    asyncio.run(view_model.start())
    return view_model


def _column(field_name: str) -> int:
    return [name for name, _ in COLUMNS].index(field_name)


def test_shape_tracks_view_rows(vm):
    model = RowTableModel(vm)
    assert model.rowCount() == 3
    assert model.columnCount() == len(COLUMNS)

    vm.set_filter_text("Person 2")

    assert model.rowCount() == 1


def test_display_uses_placeholder_for_empty_name(vm):
    model = RowTableModel(vm)
    index = model.index(1, _column("name"))
    assert model.data(index) == "Click to edit"
    assert model.data(index, Qt.ItemDataRole.EditRole) == ""


def test_custom_roles(vm):
    model = RowTableModel(vm)
    index = model.index(0, _column("name"))
    assert model.data(index, Roles.ROW_ID) == "src-0"
    assert model.data(index, Roles.IS_NEW) is False
    assert model.data(index, Roles.RAW_VALUE) == "Person 0"
    assert model.roleNames()[Roles.ROW_ID] == b"rowId"


def test_set_data_commits_edit(vm):
    model = RowTableModel(vm)
    index = model.index(0, _column("state"))

    assert model.setData(index, "NY") is True

    assert vm.row("src-0").state == "NY"
    assert model.data(model.index(0, _column("state")), Roles.IS_EDITED) is True


def test_read_only_column_rejects_edit(vm):
    model = RowTableModel(vm)
    index = model.index(0, _column("version"))
    assert not model.flags(index) & Qt.ItemFlag.ItemIsEditable
    assert model.setData(index, "v9") is False


def test_check_state_toggles_selection(vm):
    model = RowTableModel(vm)
    index = model.index(2, 0)
    changed = []
    model.dataChanged.connect(lambda *args: changed.append(args))

    model.setData(index, Qt.CheckState.Checked, Qt.ItemDataRole.CheckStateRole)

    assert vm.is_selected("src-2")
    assert model.data(index, Qt.ItemDataRole.CheckStateRole) == Qt.CheckState.Checked
    assert changed


def test_check_state_sets_rather_than_flips(vm):
    model = RowTableModel(vm)
    index = model.index(0, 0)

    model.setData(index, Qt.CheckState.Checked, Qt.ItemDataRole.CheckStateRole)
    model.setData(index, Qt.CheckState.Checked, Qt.ItemDataRole.CheckStateRole)
    assert vm.is_selected("src-0")

    model.setData(index, Qt.CheckState.Unchecked.value, Qt.ItemDataRole.CheckStateRole)
    assert not vm.is_selected("src-0")
    model.setData(index, Qt.CheckState.Unchecked, Qt.ItemDataRole.CheckStateRole)
    assert not vm.is_selected("src-0")


def test_sort_forwards_to_view_model(vm):
    model = RowTableModel(vm)
    model.sort(_column("id"), Qt.SortOrder.DescendingOrder)

    assert vm.sort_direction.value is SortDirection.DESC
    assert model.data(model.index(0, _column("id"))) == "src-2"
    assert model.headerData(_column("id"), Qt.Orientation.Horizontal) == "ID ▼"
    assert model.headerData(_column("name"), Qt.Orientation.Horizontal) == "Name"


def test_new_row_appears_after_add(vm):
    model = RowTableModel(vm)
    new_id = vm.add_row({"name": "Local"})
    assert model.rowCount() == 4
    assert model.data(model.index(3, 0), Roles.ROW_ID) == new_id
    assert model.data(model.index(3, 0), Roles.IS_NEW) is True


def test_dispose_releases_model_connections(vm):
    model = RowTableModel(vm)
    assert vm.rows_changed.handler_count == 1

    vm.dispose()
    vm.add_row({"name": "after dispose"})

    assert vm.rows_changed.handler_count == 0
    assert vm.sort_field.changed.handler_count == 0
    assert model.rowCount() == 3
