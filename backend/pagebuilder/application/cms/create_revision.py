# pagebuilder/application/cms/create_revision.py
from typing import Any, Dict, List, Optional
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from pagebuilder.domain.exceptions import RevisionNotFound, ValidationFailure
from pagebuilder.domain.positions import normalize_positions
from pagebuilder.models.page import PAGE_STATUSES
from pagebuilder.models.page_revision import PageRevision
from pagebuilder.repositories.sql import SqlPageStore, SqlRevisionStore
from pagebuilder.repositories.stores import PageStore, RevisionStore
from pagebuilder.utils.audit import log_action
from pagebuilder.utils.revision_hash import allocate_revision_hash
from pagebuilder.utils.transaction import transactional
from pagebuilder.utils.versioning import encode_snapshot
from .lookups import require_page


def insert_page_revision(
    *,
    page_id: str,
    title: str,
    slug: str,
    status: str,
    color_theme: Optional[str],
    widgets: List[Dict[str, Any]],
    parent_revision_id: Optional[str],
    created_by: Optional[str],
    notes: Optional[str],
    revisions: RevisionStore,
) -> PageRevision:
    """
    Write one immutable revision.

    The hash is allocated against every hash already used on the page. New
    revisions never carry the published flag; only publishing sets it.
    """
    if status not in PAGE_STATUSES:
        raise ValidationFailure(f"Invalid revision status: {status}", page_id=page_id)

    existing_hashes = {r.revision_hash for r in revisions.get_revisions_for_page(page_id)}

    revision = PageRevision()
    revision.page_id = page_id
    revision.revision_hash = allocate_revision_hash(
        existing_hashes,
        warn_after=current_app.config.get("REVISION_HASH_WARN_ATTEMPTS"),
    )
    revision.parent_revision_id = parent_revision_id
    revision.title = title
    revision.slug = slug
    revision.status = status
    revision.color_theme = color_theme
    revision.widgets_snapshot = encode_snapshot(normalize_positions(widgets))
    revision.created_by = created_by
    revision.notes = notes
    revision.is_published = False

    revisions.insert_revision(revision)
    return revision


def create_revision(
    *,
    page_id: str,
    data: Dict[str, Any] | None = None,
    created_by: Optional[str] = None,
    revisions: Optional[RevisionStore] = None,
    pages: Optional[PageStore] = None,
) -> PageRevision:
    """
    Capture a page revision.

    Fields missing from ``data`` are taken from the live page, so an empty
    payload snapshots the page exactly as it is. Without an explicit
    ``parent_revision_id`` the revision descends from the currently
    published one.
    """
    revisions = revisions or SqlRevisionStore()
    pages = pages or SqlPageStore()
    data = data or {}

    try:
        with transactional():
            # Row lock serializes writers on the same page
            page = require_page(page_id, for_update=True, pages=pages)

            widgets = data.get("widgets")
            if widgets is None:
                widgets = data.get("components")
            if widgets is None:
                widgets = pages.get_live_widgets(page_id)
            if not isinstance(widgets, list) or not all(isinstance(w, dict) for w in widgets):
                raise ValidationFailure("widgets must be a list of objects", page_id=page_id)

            parent_revision_id = data.get("parent_revision_id")
            if parent_revision_id:
                if revisions.get_revision_by_id(page_id, parent_revision_id) is None:
                    raise RevisionNotFound(page_id, revision_id=parent_revision_id)
            else:
                published = revisions.get_published_revision(page_id)
                parent_revision_id = published.id if published else None

            revision = insert_page_revision(
                page_id=page_id,
                title=data.get("title") or page.title,
                slug=data.get("slug") or page.slug,
                status=data.get("status") or page.status,
                color_theme=data.get("color_theme", data.get("colorTheme", page.color_theme)),
                widgets=widgets,
                parent_revision_id=parent_revision_id,
                created_by=created_by,
                notes=data.get("notes"),
                revisions=revisions,
            )

            log_action(
                action="revision.create",
                entity_type="page",
                entity_id=page_id,
                actor_id=created_by,
                payload={
                    "revision_id": revision.id,
                    "revision_hash": revision.revision_hash,
                    "parent_revision_id": parent_revision_id,
                },
            )
    except SQLAlchemyError:
        current_app.logger.exception("Creating a revision for page %s failed", page_id)
        raise

    current_app.logger.info(
        "Created revision %s (%s) for page %s",
        revision.revision_hash,
        revision.id,
        page_id,
    )
    return revision
