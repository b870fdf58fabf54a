import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from dateutil.parser import isoparse


def to_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Read a widget timestamp back from a snapshot.

    Snapshots store ISO-8601 strings; rows written before that carry epoch
    seconds (or milliseconds).
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        seconds = value / 1000 if value > 10_000_000_000 else value
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    try:
        parsed = isoparse(str(value))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def snapshot_widget(widget) -> Dict[str, Any]:
    return {
        "id": widget.id,
        "page_id": widget.page_id,
        "type": widget.type,
        "position": widget.position,
        "config": widget.config or {},
        "created_at": to_timestamp(widget.created_at),
        "updated_at": to_timestamp(widget.updated_at),
    }


def encode_snapshot(widgets: List[Dict[str, Any]]) -> str:
    return json.dumps(list(widgets), default=str)


def decode_snapshot(raw: Any) -> List[Dict[str, Any]]:
    """
    Decode a stored widgets snapshot.

    Some drivers hand JSON columns back already parsed, so lists pass through
    untouched.
    """
    if raw is None or raw == "":
        return []
    if isinstance(raw, list):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    decoded = json.loads(raw)
    if not isinstance(decoded, list):
        raise ValueError("Widget snapshot must be a JSON array")
    return decoded
