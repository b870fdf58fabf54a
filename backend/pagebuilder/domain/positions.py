"""
Widget position normalization.

Every list of widgets handed to the editor or written as a page's live state
must carry unique, zero-based, contiguous positions. Legacy data with
duplicate or sparse positions is healed here rather than rejected.
"""
from typing import Any, Dict, List, Sequence

from .exceptions import ValidationFailure

Widget = Dict[str, Any]

MOVE_DIRECTIONS = ("up", "down")


def _sort_key(widget: Widget):
    try:
        position = int(widget.get("position") or 0)
    except (TypeError, ValueError):
        position = 0
    return (position, str(widget.get("id") or ""))


def stable_sort_widgets(widgets: Sequence[Widget]) -> List[Widget]:
    """
    Sort by position, then by id for widgets sharing a position.

    The id is always present and totally ordered as a string, which makes the
    tie-break deterministic regardless of input order.
    """
    return sorted(widgets, key=_sort_key)


def normalize_positions(widgets: Sequence[Widget]) -> List[Widget]:
    """
    Return new widget dicts with positions reassigned to 0..n-1.

    Never raises: empty input returns an empty list and a list where every
    widget shares one position degenerates to id order.
    """
    return [
        {**widget, "position": index}
        for index, widget in enumerate(stable_sort_widgets(widgets))
    ]


def reindex(widgets: Sequence[Widget]) -> List[Widget]:
    """Assign positions from list order (used after explicit inserts and reorders)."""
    return [{**widget, "position": index} for index, widget in enumerate(widgets)]


def needs_position_normalization(widgets: Sequence[Widget]) -> bool:
    positions = sorted(_sort_key(w)[0] for w in widgets)
    return positions != list(range(len(positions)))


def move_widget(widgets: Sequence[Widget], widget_id: str, direction: str) -> List[Widget]:
    """
    Swap a widget with its neighbour.

    Moving the first widget up, the last widget down, or an unknown id is a
    no-op that still returns a normalized list.
    """
    if direction not in MOVE_DIRECTIONS:
        raise ValidationFailure(f"Invalid move direction: {direction}", widget_id=widget_id)

    ordered = normalize_positions(widgets)
    index = next((i for i, w in enumerate(ordered) if w.get("id") == widget_id), None)
    if index is None:
        return ordered

    target = index - 1 if direction == "up" else index + 1
    if target < 0 or target >= len(ordered):
        return ordered

    ordered[index], ordered[target] = ordered[target], ordered[index]
    return reindex(ordered)
