"""SQLAlchemy implementations of the revision and page stores."""
import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import delete, insert, select, update

from pagebuilder.domain.exceptions import ValidationFailure
from pagebuilder.domain.positions import needs_position_normalization, normalize_positions
from pagebuilder.domain.widgets import persistent_id
from pagebuilder.extensions import db
from pagebuilder.models.base import utc_now
from pagebuilder.models.page import Page
from pagebuilder.models.page_revision import PageRevision
from pagebuilder.models.widget import Widget
from pagebuilder.utils.transaction import transactional
from pagebuilder.utils.versioning import parse_timestamp, snapshot_widget, to_timestamp
from .stores import (
    ClearPublishedFlags,
    MarkRevisionPublished,
    ReplaceLiveWidgets,
    UpdatePageMetadata,
)

logger = logging.getLogger(__name__)


def _write_live_widgets(page_id: str, widgets: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Delete the page's live widgets and insert ``widgets`` in their place.

    Temporary ids get their real id here, the first time the widget becomes
    part of a live page. Runs inside the caller's transaction.
    """
    now = utc_now()
    rows = []
    seen = set()
    for widget in normalize_positions(widgets):
        if not widget.get("type"):
            raise ValidationFailure("Widget type is required", page_id=page_id, widget_id=widget.get("id"))
        widget_id = persistent_id(widget.get("id"))
        if widget_id in seen:
            widget_id = persistent_id(None)
        seen.add(widget_id)
        rows.append({
            "id": widget_id,
            "page_id": page_id,
            "type": widget["type"],
            "position": widget["position"],
            "config": widget.get("config") or {},
            "created_at": parse_timestamp(widget.get("created_at")) or now,
            "updated_at": now,
        })

    db.session.execute(delete(Widget).where(Widget.page_id == page_id))
    if rows:
        db.session.execute(insert(Widget), rows)

    page = db.session.get(Page, page_id)
    if page is not None:
        db.session.expire(page, ["widgets"])

    return [
        {
            **row,
            "created_at": to_timestamp(row["created_at"]),
            "updated_at": to_timestamp(row["updated_at"]),
        }
        for row in rows
    ]


def _update_page_metadata(page_id: str, *, title, slug, status, color_theme) -> None:
    db.session.execute(
        update(Page)
        .where(Page.id == page_id)
        .values(
            title=title,
            slug=slug,
            status=status,
            color_theme=color_theme,
            updated_at=utc_now(),
        )
    )


class SqlRevisionStore:
    def get_revisions_for_page(self, page_id: str) -> List[PageRevision]:
        return (
            PageRevision.query
            .filter_by(page_id=page_id)
            .order_by(PageRevision.created_at.desc(), PageRevision.id.desc())
            .all()
        )

    def get_revision_by_id(self, page_id: str, revision_id: str) -> Optional[PageRevision]:
        return PageRevision.query.filter_by(page_id=page_id, id=revision_id).first()

    def get_revision_by_hash(self, page_id: str, revision_hash: str) -> Optional[PageRevision]:
        return PageRevision.query.filter_by(page_id=page_id, revision_hash=revision_hash).first()

    def insert_revision(self, revision: PageRevision) -> None:
        with transactional():
            db.session.add(revision)
            db.session.flush()

    def get_published_revision(self, page_id: str) -> Optional[PageRevision]:
        return (
            PageRevision.query
            .filter_by(page_id=page_id, is_published=True)
            .order_by(PageRevision.created_at.desc())
            .first()
        )

    def run_batch(self, operations: Sequence[Any]) -> None:
        with transactional():
            for operation in operations:
                self._apply(operation)
            db.session.flush()

    def _apply(self, operation: Any) -> None:
        if isinstance(operation, ClearPublishedFlags):
            db.session.execute(
                update(PageRevision)
                .where(PageRevision.page_id == operation.page_id)
                .values(is_published=False)
            )
        elif isinstance(operation, MarkRevisionPublished):
            db.session.execute(
                update(PageRevision)
                .where(PageRevision.id == operation.revision_id)
                .values(is_published=True, status="published")
            )
        elif isinstance(operation, UpdatePageMetadata):
            _update_page_metadata(
                operation.page_id,
                title=operation.title,
                slug=operation.slug,
                status=operation.status,
                color_theme=operation.color_theme,
            )
        elif isinstance(operation, ReplaceLiveWidgets):
            _write_live_widgets(operation.page_id, operation.widgets)
        else:
            raise TypeError(f"Unsupported batch operation: {type(operation).__name__}")


class SqlPageStore:
    def get_page(self, page_id: str, for_update: bool = False) -> Optional[Page]:
        stmt = select(Page).where(Page.id == page_id, Page.deleted_at.is_(None))
        if for_update:
            stmt = stmt.with_for_update()
        return db.session.execute(stmt).scalar_one_or_none()

    def get_live_widgets(self, page_id: str) -> List[Dict[str, Any]]:
        widgets = (
            Widget.query
            .filter_by(page_id=page_id)
            .order_by(Widget.position.asc(), Widget.id.asc())
            .all()
        )
        snapshot = [snapshot_widget(w) for w in widgets]
        if needs_position_normalization(snapshot):
            logger.debug("Healing widget positions for page %s", page_id)
        return normalize_positions(snapshot)

    def replace_live_widgets(self, page_id: str, widgets: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        with transactional():
            written = _write_live_widgets(page_id, widgets)
        return written

    def update_page_metadata(self, page_id: str, *, title, slug, status, color_theme) -> None:
        with transactional():
            _update_page_metadata(
                page_id,
                title=title,
                slug=slug,
                status=status,
                color_theme=color_theme,
            )
