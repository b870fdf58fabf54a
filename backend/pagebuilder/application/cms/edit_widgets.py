from typing import Any, Dict, List, Optional, Sequence
from flask import current_app
from pagebuilder.domain.exceptions import ValidationFailure, WidgetNotFound
from pagebuilder.domain.positions import move_widget
from pagebuilder.domain.widget_changes import WIDGET_ACTIONS, WidgetChange, apply_widget_change
from pagebuilder.models.base import utc_now
from pagebuilder.repositories.sql import SqlPageStore
from pagebuilder.repositories.stores import PageStore
from pagebuilder.utils.audit import log_action
from pagebuilder.utils.transaction import transactional
from .lookups import require_page


def get_live_widgets(*, page_id: str, pages: Optional[PageStore] = None) -> List[Dict[str, Any]]:
    pages = pages or SqlPageStore()
    require_page(page_id, pages=pages)
    return pages.get_live_widgets(page_id)


def _save(
    *,
    page_id: str,
    widgets: Sequence[Dict[str, Any]],
    actor_id: Optional[str],
    action: str,
    payload: Dict[str, Any],
    pages: PageStore,
) -> List[Dict[str, Any]]:
    page = require_page(page_id, for_update=True, pages=pages)
    written = pages.replace_live_widgets(page_id, widgets)
    page.updated_at = utc_now()

    log_action(
        action=action,
        entity_type="page",
        entity_id=page_id,
        actor_id=actor_id,
        payload={**payload, "widgets": len(written)},
    )
    return written


def replace_widgets(
    *,
    page_id: str,
    widgets: Any,
    actor_id: Optional[str] = None,
    pages: Optional[PageStore] = None,
) -> List[Dict[str, Any]]:
    """Overwrite the live widget set of a page with ``widgets`` (normalized)."""
    if not isinstance(widgets, list) or not all(isinstance(w, dict) for w in widgets):
        raise ValidationFailure("widgets must be a list of objects", page_id=page_id)

    pages = pages or SqlPageStore()
    with transactional():
        written = _save(
            page_id=page_id,
            widgets=widgets,
            actor_id=actor_id,
            action="widgets.replace",
            payload={},
            pages=pages,
        )

    current_app.logger.info("Replaced %d live widgets on page %s", len(written), page_id)
    return written


def apply_widget_changes(
    *,
    page_id: str,
    payload: Dict[str, Any],
    actor_id: Optional[str] = None,
    pages: Optional[PageStore] = None,
) -> List[Dict[str, Any]]:
    """
    Apply one editor change to the live widgets and persist the result.

    Unknown actions leave the page untouched and return the live widgets.
    """
    change = WidgetChange.from_payload(payload)
    pages = pages or SqlPageStore()

    if change.action not in WIDGET_ACTIONS:
        current_app.logger.info("Ignoring unknown widget action %r on page %s", change.action, page_id)
        return get_live_widgets(page_id=page_id, pages=pages)

    with transactional():
        require_page(page_id, for_update=True, pages=pages)
        current = pages.get_live_widgets(page_id)
        updated = apply_widget_change(current, change)
        written = _save(
            page_id=page_id,
            widgets=updated,
            actor_id=actor_id,
            action=f"widgets.{change.action}",
            payload={
                "widget_ids": change.widget_ids or [w.get("id") for w in change.widgets],
            },
            pages=pages,
        )

    return written


def move_page_widget(
    *,
    page_id: str,
    widget_id: str,
    direction: str,
    actor_id: Optional[str] = None,
    pages: Optional[PageStore] = None,
) -> List[Dict[str, Any]]:
    pages = pages or SqlPageStore()
    with transactional():
        require_page(page_id, for_update=True, pages=pages)
        current = pages.get_live_widgets(page_id)
        if not any(w.get("id") == widget_id for w in current):
            raise WidgetNotFound(page_id, widget_id)

        moved = move_widget(current, widget_id, direction)
        written = _save(
            page_id=page_id,
            widgets=moved,
            actor_id=actor_id,
            action="widgets.move",
            payload={"widget_id": widget_id, "direction": direction},
            pages=pages,
        )

    return written
