from typing import Any, Dict, Optional
from flask import current_app
from sqlalchemy.exc import IntegrityError
from pagebuilder.domain.exceptions import DuplicateSlug, ValidationFailure
from pagebuilder.extensions import db
from pagebuilder.models.page import PAGE_STATUSES, Page
from pagebuilder.repositories.sql import SqlPageStore
from pagebuilder.utils.audit import log_action
from pagebuilder.utils.transaction import transactional


def create_page(
    *,
    actor_id: Optional[str],
    data: Dict[str, Any],
) -> Page:
    """
    Create a new page, in DRAFT state unless told otherwise.

    Edge cases handled:
    - Missing required fields
    - Unknown status
    - Duplicate slug
    - Initial widgets are normalized before they become live
    """

    title: str | None = data.get("title")
    slug: str | None = data.get("slug")
    status: str = data.get("status") or "draft"

    if not title or not slug:
        raise ValidationFailure("Both title and slug are required")

    if status not in PAGE_STATUSES:
        raise ValidationFailure(f"Invalid page status: {status}")

    if Page.query.filter_by(slug=slug).first():
        raise DuplicateSlug(slug)

    page = Page()
    page.title = title
    page.slug = slug
    page.status = status
    page.color_theme = data.get("color_theme") or data.get("colorTheme")

    widgets = data.get("widgets") or data.get("components") or []

    try:
        with transactional():
            db.session.add(page)
            db.session.flush()  # ensures page.id is available

            if widgets:
                SqlPageStore().replace_live_widgets(page.id, widgets)

            log_action(
                action="page.create",
                entity_type="page",
                entity_id=page.id,
                actor_id=actor_id,
                payload={
                    "title": page.title,
                    "slug": page.slug,
                    "status": page.status,
                    "widgets": len(widgets),
                },
            )

    except IntegrityError as exc:
        # Raced with another create on the same slug
        raise DuplicateSlug(slug) from exc

    current_app.logger.info("Created page %s (%s)", page.id, page.slug)
    return page
