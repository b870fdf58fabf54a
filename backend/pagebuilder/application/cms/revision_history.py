"""
Read side of the revision history: listings, the tree view, heads and lookups.

Nothing here writes; every function can run outside a transaction.
"""
from typing import Any, List, Optional, Tuple
from flask import current_app
from pagebuilder.domain.exceptions import RevisionNotFound
from pagebuilder.domain.revision_tree import RevisionNode, build_revision_tree, find_heads
from pagebuilder.models.page_revision import PageRevision
from pagebuilder.repositories.sql import SqlRevisionStore
from pagebuilder.repositories.stores import PageStore, RevisionStore
from pagebuilder.utils.pagination import CursorMeta, paginate_cursor, parse_limit
from pagebuilder.utils.revision_hash import is_valid_revision_hash
from .lookups import require_page


def list_revisions(
    *,
    page_id: str,
    cursor: Optional[str] = None,
    limit: Any = None,
    pages: Optional[PageStore] = None,
) -> Tuple[List[PageRevision], CursorMeta]:
    require_page(page_id, pages=pages)
    size = parse_limit(limit, current_app.config.get("REVISIONS_PAGE_SIZE", 50))
    return paginate_cursor(
        PageRevision.query.filter_by(page_id=page_id),
        model=PageRevision,
        limit=size,
        cursor=cursor,
    )


def revision_tree(
    *,
    page_id: str,
    revisions: Optional[RevisionStore] = None,
    pages: Optional[PageStore] = None,
) -> List[RevisionNode]:
    require_page(page_id, pages=pages)
    revisions = revisions or SqlRevisionStore()
    return build_revision_tree(revisions.get_revisions_for_page(page_id))


def revision_heads(
    *,
    page_id: str,
    revisions: Optional[RevisionStore] = None,
    pages: Optional[PageStore] = None,
) -> List[PageRevision]:
    require_page(page_id, pages=pages)
    revisions = revisions or SqlRevisionStore()
    return find_heads(revisions.get_revisions_for_page(page_id))


def get_revision_by_hash(
    *,
    page_id: str,
    revision_hash: str,
    revisions: Optional[RevisionStore] = None,
) -> PageRevision:
    revision_hash = (revision_hash or "").lower()
    if not is_valid_revision_hash(revision_hash):
        raise RevisionNotFound(page_id, revision_hash=revision_hash)

    revision = (revisions or SqlRevisionStore()).get_revision_by_hash(page_id, revision_hash)
    if revision is None:
        raise RevisionNotFound(page_id, revision_hash=revision_hash)
    return revision


def get_published_revision(
    *,
    page_id: str,
    revisions: Optional[RevisionStore] = None,
    pages: Optional[PageStore] = None,
) -> Optional[PageRevision]:
    require_page(page_id, pages=pages)
    return (revisions or SqlRevisionStore()).get_published_revision(page_id)
