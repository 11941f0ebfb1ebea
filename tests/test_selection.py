"""Tests for SelectionSet."""

from tableeditor.application.services.selection import SelectionSet


def _ids(count):
    return [f"row-{i}" for i in range(count)]


def test_toggle_flips_membership():
    selection = SelectionSet()
    assert selection.toggle("row-1") is True
    assert selection.is_selected("row-1")
    assert selection.toggle("row-1") is False
    assert "row-1" not in selection


def test_toggle_all_selects_visible():
    selection = SelectionSet()
    selection.toggle_all(_ids(10))
    assert len(selection) == 10
    assert selection.all_selected(10)


def test_toggle_all_when_everything_selected_clears():
    selection = SelectionSet()
    selection.toggle_all(_ids(10))
    selection.toggle_all(_ids(10))
    assert len(selection) == 0


def test_partial_selection_then_toggle_all_selects_all():
    selection = SelectionSet()
    for row_id in _ids(7):
        selection.toggle(row_id)
    assert not selection.all_selected(10)

    selection.toggle_all(_ids(10))

    assert selection.ids() == frozenset(_ids(10))


def test_toggle_all_replaces_hidden_selection():
    selection = SelectionSet()
    selection.toggle("hidden")
    selection.toggle_all(["a", "b"])
    assert selection.ids() == frozenset({"a", "b"})


def test_toggle_all_on_empty_view_clears():
    selection = SelectionSet()
    selection.toggle("row-1")
    selection.toggle_all([])
    assert len(selection) == 0
    assert not selection.all_selected(0)


def test_count_equality_decides_all_selected():
    # Three ids selected, three rows visible but different ones.
    selection = SelectionSet()
    for row_id in ("x", "y", "z"):
        selection.toggle(row_id)
    selection.toggle_all(["a", "b", "c"])
    assert len(selection) == 0


def test_clear_reports_whether_anything_changed():
    selection = SelectionSet()
    assert selection.clear() is False
    selection.toggle("a")
    assert selection.clear() is True
    assert selection.ids() == frozenset()
