from typing import Optional
from pagebuilder.domain.exceptions import PageNotFound, RevisionNotFound
from pagebuilder.models.page import Page
from pagebuilder.repositories.sql import SqlPageStore, SqlRevisionStore
from pagebuilder.repositories.stores import PageStore, RevisionStore


def require_page(
    page_id: str,
    *,
    for_update: bool = False,
    pages: Optional[PageStore] = None,
) -> Page:
    page = (pages or SqlPageStore()).get_page(page_id, for_update=for_update)
    if page is None:
        raise PageNotFound(page_id)
    return page


def require_revision(
    page_id: str,
    revision_id: str,
    *,
    revisions: Optional[RevisionStore] = None,
):
    revision = (revisions or SqlRevisionStore()).get_revision_by_id(page_id, revision_id)
    if revision is None:
        raise RevisionNotFound(page_id, revision_id=revision_id)
    return revision
