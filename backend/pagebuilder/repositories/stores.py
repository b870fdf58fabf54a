"""
Persistence boundary for the revision engine.

The engine only talks to these two protocols. ``run_batch`` receives plain
operation objects and must apply all of them or none.
"""
from typing import Any, Dict, List, Optional, Protocol, Sequence


class ClearPublishedFlags:
    def __init__(self, page_id: str):
        self.page_id = page_id


class MarkRevisionPublished:
    def __init__(self, revision_id: str):
        self.revision_id = revision_id


class UpdatePageMetadata:
    def __init__(self, page_id: str, *, title: str, slug: str, status: str, color_theme: Optional[str]):
        self.page_id = page_id
        self.title = title
        self.slug = slug
        self.status = status
        self.color_theme = color_theme


class ReplaceLiveWidgets:
    def __init__(self, page_id: str, widgets: Sequence[Dict[str, Any]]):
        self.page_id = page_id
        self.widgets = list(widgets)


class RevisionStore(Protocol):
    def get_revisions_for_page(self, page_id: str) -> List[Any]: ...

    def get_revision_by_id(self, page_id: str, revision_id: str) -> Optional[Any]: ...

    def get_revision_by_hash(self, page_id: str, revision_hash: str) -> Optional[Any]: ...

    def insert_revision(self, revision: Any) -> None: ...

    def get_published_revision(self, page_id: str) -> Optional[Any]: ...

    def run_batch(self, operations: Sequence[Any]) -> None: ...


class PageStore(Protocol):
    def get_page(self, page_id: str, for_update: bool = False) -> Optional[Any]: ...

    def get_live_widgets(self, page_id: str) -> List[Dict[str, Any]]: ...

    def replace_live_widgets(self, page_id: str, widgets: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]: ...

    def update_page_metadata(
        self,
        page_id: str,
        *,
        title: str,
        slug: str,
        status: str,
        color_theme: Optional[str],
    ) -> None: ...
