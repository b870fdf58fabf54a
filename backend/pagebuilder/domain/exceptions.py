from typing import Any, Dict, Optional


class PageBuilderError(Exception):
    """
    Base class for errors surfaced to API callers.

    `context` carries identifiers (page_id, revision_id, ...) so an editor
    can retry the failed operation manually.
    """
    status_code = 500

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = {k: v for k, v in context.items() if v is not None}

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "error": type(self).__name__,
            "message": self.message,
        }
        if self.context:
            data["context"] = self.context
        return data


class NotFound(PageBuilderError):
    status_code = 404


class PageNotFound(NotFound):
    def __init__(self, page_id: str):
        super().__init__("Page not found", page_id=page_id)


class RevisionNotFound(NotFound):
    def __init__(self, page_id: str, revision_id: Optional[str] = None, revision_hash: Optional[str] = None):
        super().__init__(
            "Revision not found",
            page_id=page_id,
            revision_id=revision_id,
            revision_hash=revision_hash,
        )


class WidgetNotFound(NotFound):
    def __init__(self, page_id: str, widget_id: str):
        super().__init__("Widget not found", page_id=page_id, widget_id=widget_id)


class ValidationFailure(PageBuilderError):
    status_code = 400


class ConcurrentModification(PageBuilderError):
    status_code = 409


class RevisionTreeError(PageBuilderError):
    """Raised when a revision row is too malformed to place in the history graph."""
    status_code = 500


class DuplicateSlug(PageBuilderError):
    status_code = 409

    def __init__(self, slug: str):
        super().__init__("A page with this slug already exists", slug=slug)
