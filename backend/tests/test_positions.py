"""Tests for widget position normalization and moves."""

import pytest

from pagebuilder.domain.exceptions import ValidationFailure
from pagebuilder.domain.positions import (
    move_widget,
    needs_position_normalization,
    normalize_positions,
    stable_sort_widgets,
)


def _ids(widgets):
    return [w["id"] for w in widgets]


def test_normalize_empty():
    assert normalize_positions([]) == []


def test_normalize_sparse_positions():
    widgets = [{"id": "a", "position": 10}, {"id": "b", "position": 3}, {"id": "c", "position": 7}]
    result = normalize_positions(widgets)
    assert _ids(result) == ["b", "c", "a"]
    assert [w["position"] for w in result] == [0, 1, 2]


def test_normalize_duplicate_positions_breaks_ties_by_id():
    widgets = [{"id": "z", "position": 0}, {"id": "m", "position": 0}, {"id": "a", "position": 0}]
    assert _ids(normalize_positions(widgets)) == ["a", "m", "z"]


def test_normalize_is_deterministic_regardless_of_input_order():
    widgets = [{"id": "b", "position": 1}, {"id": "a", "position": 1}, {"id": "c", "position": 0}]
    assert normalize_positions(widgets) == normalize_positions(list(reversed(widgets)))


def test_normalize_is_idempotent():
    once = normalize_positions([{"id": "x", "position": 5}, {"id": "y", "position": 2}])
    assert normalize_positions(once) == once


def test_normalize_does_not_mutate_input():
    widgets = [{"id": "a", "position": 4}]
    normalize_positions(widgets)
    assert widgets[0]["position"] == 4


def test_missing_or_bad_positions_sort_as_zero():
    widgets = [{"id": "b", "position": 1}, {"id": "a"}, {"id": "c", "position": "oops"}]
    assert _ids(stable_sort_widgets(widgets)) == ["a", "c", "b"]


def test_needs_position_normalization():
    assert not needs_position_normalization([])
    assert not needs_position_normalization([{"id": "a", "position": 0}, {"id": "b", "position": 1}])
    assert needs_position_normalization([{"id": "a", "position": 0}, {"id": "b", "position": 0}])
    assert needs_position_normalization([{"id": "a", "position": 1}])


class TestMoveWidget:
    widgets = [{"id": "a", "position": 0}, {"id": "b", "position": 1}, {"id": "c", "position": 2}]

    def test_move_up(self):
        assert _ids(move_widget(self.widgets, "b", "up")) == ["b", "a", "c"]

    def test_move_down(self):
        result = move_widget(self.widgets, "b", "down")
        assert _ids(result) == ["a", "c", "b"]
        assert [w["position"] for w in result] == [0, 1, 2]

    def test_edges_are_noops(self):
        assert _ids(move_widget(self.widgets, "a", "up")) == ["a", "b", "c"]
        assert _ids(move_widget(self.widgets, "c", "down")) == ["a", "b", "c"]

    def test_unknown_id_is_noop(self):
        assert _ids(move_widget(self.widgets, "nope", "up")) == ["a", "b", "c"]

    def test_invalid_direction(self):
        with pytest.raises(ValidationFailure):
            move_widget(self.widgets, "a", "sideways")
