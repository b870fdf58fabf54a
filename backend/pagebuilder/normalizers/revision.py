# pagebuilder/normalizers/revision.py
from typing import Any, Dict

from pagebuilder.utils.versioning import to_timestamp
from .widget import normalize_widget


def normalize_revision(revision, include_widgets: bool = False) -> Dict[str, Any]:
    """
    Serialize a PageRevision.

    Listings omit the widget snapshot; single-revision reads include it.
    """
    data: Dict[str, Any] = {
        "id": revision.id,
        "page_id": revision.page_id,
        "revision_hash": revision.revision_hash,
        "parent_revision_id": revision.parent_revision_id,
        "title": revision.title,
        "slug": revision.slug,
        "status": revision.status,
        "color_theme": revision.color_theme,
        "created_by": revision.created_by,
        "notes": revision.notes,
        "is_published": bool(revision.is_published),
        "created_at": to_timestamp(revision.created_at),
    }

    if include_widgets:
        data["widgets"] = [normalize_widget(w) for w in revision.widgets]

    return data


def normalize_revision_node(node) -> Dict[str, Any]:
    return {
        **normalize_revision(node.revision),
        "depth": node.depth,
        "branch": node.branch,
        "children": [child.id for child in node.children],
    }
