# pagebuilder/normalizers/pagination.py
from typing import Callable, Any, List, Dict

from pagebuilder.utils.pagination import CursorMeta


def normalize_pagination(
    items: List[Any],
    normalize_fn: Callable[[Any], Dict[str, Any]],
    cursor: CursorMeta,
) -> Dict[str, Any]:
    """
    Normalize a cursor-paginated API response.

    Every list endpoint shares this envelope so clients can page through any
    of them with the same code.
    """
    return {
        "items": [normalize_fn(item) for item in items],
        "pagination": {
            "has_more": cursor["has_more"],
            "next_cursor": cursor["next_cursor"],
        },
    }
