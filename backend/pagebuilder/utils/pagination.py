# pagebuilder/utils/pagination.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Tuple, Type, TypedDict

from dateutil.parser import isoparse
from sqlalchemy.orm import Query
from sqlalchemy.sql import and_, or_

from pagebuilder.domain.exceptions import ValidationFailure

MAX_PAGE_SIZE = 200


class CursorMeta(TypedDict):
    """
    Cursor pagination metadata returned next to every list of revisions.
    """
    has_more: bool
    next_cursor: Optional[str]


def encode_cursor(created_at: datetime, row_id: Any) -> str:
    """
    Encode a cursor from the row's sort key.

    Format: ISO8601|<id>
    """
    if not isinstance(created_at, datetime) or row_id is None:
        raise ValueError("created_at and row_id are required to encode cursor")

    return f"{created_at.isoformat()}|{row_id}"


def decode_cursor(cursor: str) -> Tuple[datetime, str]:
    if not cursor or "|" not in cursor:
        raise ValidationFailure("Invalid cursor format", cursor=cursor)

    ts_str, row_id = cursor.split("|", 1)
    try:
        created_at = isoparse(ts_str)
    except ValueError as exc:
        raise ValidationFailure("Invalid cursor format", cursor=cursor) from exc

    if not row_id:
        raise ValidationFailure("Invalid cursor format", cursor=cursor)

    return created_at, row_id


def parse_limit(raw: Any, default: int) -> int:
    if raw in (None, ""):
        return default
    try:
        limit = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationFailure("Limit must be an integer", limit=raw) from exc
    if limit <= 0:
        raise ValidationFailure("Limit must be greater than zero", limit=limit)
    return min(limit, MAX_PAGE_SIZE)


def paginate_cursor(
    query: Query,
    *,
    model: Type[Any],
    limit: int,
    cursor: Optional[str] = None,
) -> tuple[list[Any], CursorMeta]:
    """
    Execute a cursor-paginated query, newest first.

    Ordering contract:
      ORDER BY created_at DESC, id DESC

    Fetches ``limit + 1`` rows to detect continuation and only hands out a
    ``next_cursor`` when more rows exist.
    """
    if limit <= 0:
        raise ValidationFailure("Limit must be greater than zero", limit=limit)

    if cursor:
        cursor_ts, cursor_id = decode_cursor(cursor)
        query = query.filter(
            or_(
                model.created_at < cursor_ts,
                and_(
                    model.created_at == cursor_ts,
                    model.id < cursor_id,
                ),
            )
        )

    rows = (
        query
        .order_by(model.created_at.desc(), model.id.desc())
        .limit(limit + 1)
        .all()
    )

    has_more = len(rows) > limit
    items = rows[:limit]

    next_cursor: Optional[str] = None
    if has_more and items:
        last = items[-1]
        next_cursor = encode_cursor(last.created_at, last.id)

    return items, {
        "has_more": has_more,
        "next_cursor": next_cursor,
    }
