"""
Apply editor widget changes (add / remove / update / reorder) to a widget list.

Every change that can alter membership or order hands its result to the
position normalizer before returning.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from .positions import Widget, normalize_positions, reindex
from .widgets import generate_temporary_id, is_recognized_id

logger = logging.getLogger(__name__)

WIDGET_ACTIONS = ("add", "remove", "update", "reorder")


class WidgetChange:
    def __init__(
        self,
        action: str,
        widgets: Optional[List[Widget]] = None,
        widget_ids: Optional[List[str]] = None,
        position: Optional[int] = None,
    ):
        self.action = action
        self.widgets = widgets or []
        self.widget_ids = widget_ids or []
        self.position = position

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "WidgetChange":
        """
        Build a change from an editor payload.

        Accepts the wrapped form ``{"type": "widget_changes", "changes": {...}}``
        as well as the bare changes object. ``components`` is accepted as a
        legacy alias of ``widgets`` and ``widgetIds`` of ``widget_ids``.
        """
        changes = payload.get("changes", payload) if isinstance(payload, dict) else {}
        if not isinstance(changes, dict):
            changes = {}

        widgets = changes.get("widgets")
        if widgets is None:
            widgets = changes.get("components")

        widget_ids = changes.get("widget_ids")
        if widget_ids is None:
            widget_ids = changes.get("widgetIds")

        position = changes.get("position")
        if isinstance(position, bool) or not isinstance(position, int):
            position = None

        return cls(
            action=changes.get("action") or "",
            widgets=[w for w in (widgets or []) if isinstance(w, dict)],
            widget_ids=[str(i) for i in (widget_ids or [])],
            position=position,
        )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _add(current: Sequence[Widget], new_widgets: Sequence[Widget], position: Optional[int]) -> List[Widget]:
    result = normalize_positions(current)
    now = _now()
    fallback_page_id = result[0].get("page_id") if result else None

    prepared = []
    for widget in new_widgets:
        widget_id = widget.get("id")
        prepared.append({
            **widget,
            "id": widget_id if is_recognized_id(widget_id) else generate_temporary_id(),
            "page_id": widget.get("page_id") or fallback_page_id,
            "config": widget.get("config") or {},
            "created_at": widget.get("created_at") or now,
            "updated_at": widget.get("updated_at") or now,
        })

    if position is not None and 0 <= position <= len(result):
        result[position:position] = prepared
    else:
        result.extend(prepared)

    return normalize_positions(reindex(result))


def _remove(current: Sequence[Widget], widget_ids: Sequence[str]) -> List[Widget]:
    doomed = set(widget_ids)
    return normalize_positions([w for w in current if w.get("id") not in doomed])


def _update(current: Sequence[Widget], updates: Sequence[Widget]) -> List[Widget]:
    by_id = {u.get("id"): u for u in updates if u.get("id")}
    result = []
    for widget in current:
        update = by_id.get(widget.get("id"))
        if update is None:
            result.append(widget)
            continue
        merged = {**widget, **update}
        merged["config"] = {**(widget.get("config") or {}), **(update.get("config") or {})}
        # Positions only move through add / remove / reorder.
        merged["position"] = widget.get("position")
        result.append(merged)
    return result


def _reorder(current: Sequence[Widget], ordered_ids: Sequence[str]) -> List[Widget]:
    by_id = {w.get("id"): w for w in current}
    result = [by_id[i] for i in ordered_ids if i in by_id]
    return normalize_positions(reindex(result))


def apply_widget_change(current: Sequence[Widget], change: WidgetChange) -> List[Widget]:
    """
    Return the widget list after applying ``change``.

    Unknown actions return ``current`` unchanged so that partially understood
    payloads from newer editors never break the page.
    """
    if change.action == "add":
        return _add(current, change.widgets, change.position)
    if change.action == "remove":
        return _remove(current, change.widget_ids)
    if change.action == "update":
        return _update(current, change.widgets)
    if change.action == "reorder":
        ordered_ids = change.widget_ids or [w.get("id") for w in change.widgets]
        return _reorder(current, ordered_ids)

    logger.debug("Ignoring unknown widget change action %r", change.action)
    return list(current)
