from typing import Any, Dict, Optional
from pagebuilder.domain.exceptions import DuplicateSlug, ValidationFailure
from pagebuilder.models.base import utc_now
from pagebuilder.models.page import PAGE_STATUSES, Page
from pagebuilder.utils.audit import log_action
from pagebuilder.utils.transaction import transactional


ALLOWED_UPDATE_FIELDS = ("title", "slug", "status", "color_theme")


def update_page(
    *,
    page: Page,
    actor_id: Optional[str],
    data: Dict[str, Any],
) -> Page:
    """
    Update mutable metadata on a live page.

    Design rules:
    - Only whitelisted fields are mutable
    - No silent no-op updates
    - Revisions are untouched; capturing the change is the editor's call
    """
    if "colorTheme" in data and "color_theme" not in data:
        data = {**data, "color_theme": data["colorTheme"]}

    if "status" in data and data["status"] not in PAGE_STATUSES:
        raise ValidationFailure(f"Invalid page status: {data['status']}", page_id=page.id)

    if "slug" in data and data["slug"] != page.slug:
        if not data["slug"]:
            raise ValidationFailure("Slug cannot be empty", page_id=page.id)
        if Page.query.filter_by(slug=data["slug"]).first():
            raise DuplicateSlug(data["slug"])

    if "title" in data and not data["title"]:
        raise ValidationFailure("Title cannot be empty", page_id=page.id)

    changed_fields: list[str] = []

    with transactional():
        for field in ALLOWED_UPDATE_FIELDS:
            if field in data and getattr(page, field) != data[field]:
                setattr(page, field, data[field])
                changed_fields.append(field)

        if not changed_fields:
            # Explicitly fail instead of silently succeeding
            raise ValidationFailure("No valid fields provided for update", page_id=page.id)

        page.updated_at = utc_now()

        log_action(
            action="page.update",
            entity_type="page",
            entity_id=page.id,
            actor_id=actor_id,
            payload={
                "fields": changed_fields,
            },
        )

    return page
