"""Tests for applying editor widget changes."""

from pagebuilder.domain.positions import normalize_positions
from pagebuilder.domain.widget_changes import WidgetChange, apply_widget_change
from pagebuilder.domain.widgets import (
    TEMP_ID_PREFIX,
    generate_temporary_id,
    is_recognized_id,
    persistent_id,
)


def _ids(widgets):
    return [w["id"] for w in widgets]


def _positions(widgets):
    return [w["position"] for w in widgets]


CURRENT = [
    {"id": "1", "page_id": "p", "type": "text", "position": 0, "config": {"text": "hi"}},
    {"id": "2", "page_id": "p", "type": "image", "position": 1, "config": {"src": "a.png"}},
]


def test_add_appends_with_temporary_id():
    change = WidgetChange("add", widgets=[{"type": "button", "config": {}}])
    result = apply_widget_change(CURRENT, change)

    assert _positions(result) == [0, 1, 2]
    added = result[-1]
    assert added["id"].startswith(TEMP_ID_PREFIX)
    assert added["page_id"] == "p"
    assert added["created_at"] and added["updated_at"]


def test_add_at_position_inserts():
    change = WidgetChange("add", widgets=[{"id": "temp-1-x", "type": "hero"}], position=0)
    result = apply_widget_change(CURRENT, change)
    assert _ids(result) == ["temp-1-x", "1", "2"]
    assert _positions(result) == [0, 1, 2]


def test_add_out_of_range_position_appends():
    change = WidgetChange("add", widgets=[{"id": "9", "type": "hero"}], position=42)
    assert _ids(apply_widget_change(CURRENT, change)) == ["1", "2", "9"]


def test_add_replaces_unrecognized_ids():
    change = WidgetChange("add", widgets=[{"id": "not-a-real-id", "type": "text"}])
    added = apply_widget_change(CURRENT, change)[-1]
    assert added["id"].startswith(TEMP_ID_PREFIX)


def test_remove():
    result = apply_widget_change(CURRENT, WidgetChange("remove", widget_ids=["1"]))
    assert _ids(result) == ["2"]
    assert _positions(result) == [0]


def test_update_merges_config_and_keeps_position():
    change = WidgetChange("update", widgets=[{"id": "1", "position": 9, "config": {"size": "lg"}}])
    result = apply_widget_change(CURRENT, change)
    assert result[0]["config"] == {"text": "hi", "size": "lg"}
    assert result[0]["position"] == 0


def test_reorder_by_ids():
    result = apply_widget_change(CURRENT, WidgetChange("reorder", widget_ids=["2", "1"]))
    assert _ids(result) == ["2", "1"]
    assert _positions(result) == [0, 1]


def test_reorder_drops_unknown_and_missing_ids():
    result = apply_widget_change(CURRENT, WidgetChange("reorder", widget_ids=["2", "ghost"]))
    assert _ids(result) == ["2"]


def test_unknown_action_returns_current():
    result = apply_widget_change(CURRENT, WidgetChange("explode"))
    assert result == CURRENT
    assert result is not CURRENT


def test_from_payload_accepts_aliases():
    change = WidgetChange.from_payload({
        "type": "widget_changes",
        "changes": {"action": "remove", "widgetIds": [1, 2]},
    })
    assert change.action == "remove"
    assert change.widget_ids == ["1", "2"]

    change = WidgetChange.from_payload({"action": "add", "components": [{"type": "text"}], "position": True})
    assert change.widgets == [{"type": "text"}]
    assert change.position is None


def test_editing_session():
    widgets = []
    widgets = apply_widget_change(widgets, WidgetChange("add", widgets=[{"id": "temp-1-a", "type": "text"}]))
    widgets = apply_widget_change(widgets, WidgetChange("add", widgets=[{"id": "temp-2-b", "type": "image"}]))
    widgets = apply_widget_change(widgets, WidgetChange("add", widgets=[{"id": "temp-3-c", "type": "hero"}], position=0))
    widgets = apply_widget_change(widgets, WidgetChange("remove", widget_ids=["temp-1-a"]))
    widgets = apply_widget_change(widgets, WidgetChange("reorder", widget_ids=["temp-2-b", "temp-3-c"]))

    assert _ids(widgets) == ["temp-2-b", "temp-3-c"]
    assert _positions(widgets) == [0, 1]


def test_temporary_ids():
    temp = generate_temporary_id()
    assert temp.startswith(TEMP_ID_PREFIX)
    assert is_recognized_id(temp)
    assert is_recognized_id("123")
    assert not is_recognized_id("abc")
    assert not is_recognized_id(None)


def test_persistent_id_replaces_temporary_ids():
    assert persistent_id("temp-1-abc") != "temp-1-abc"
    assert len(persistent_id(None)) == 36
    assert persistent_id("kept") == "kept"


def test_reorder_with_current_order_keeps_positions():
    current = normalize_positions([
        {"id": "a", "type": "text", "position": 0},
        {"id": "b", "type": "text", "position": 1},
        {"id": "c", "type": "text", "position": 2},
    ])
    result = apply_widget_change(current, WidgetChange("reorder", widget_ids=_ids(current)))

    assert result == current
    assert _positions(result) == [0, 1, 2]


def test_duplicate_positions_then_remove():
    widgets = [{"id": "w1", "position": 0}, {"id": "w2", "position": 0}, {"id": "w3", "position": 1}]

    normalized = normalize_positions(widgets)
    assert [(w["id"], w["position"]) for w in normalized] == [("w1", 0), ("w2", 1), ("w3", 2)]

    result = apply_widget_change(normalized, WidgetChange("remove", widget_ids=["w2"]))
    assert result == [{"id": "w1", "position": 0}, {"id": "w3", "position": 1}]
