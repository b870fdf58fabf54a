import secrets
import time
import uuid

# Widgets created in the editor carry this prefix until first persisted.
TEMP_ID_PREFIX = "temp-"


def is_temporary_id(widget_id) -> bool:
    return isinstance(widget_id, str) and widget_id.startswith(TEMP_ID_PREFIX)


def is_recognized_id(widget_id) -> bool:
    """Temporary ids and legacy numeric ids are kept as-is on add."""
    if not isinstance(widget_id, str) or not widget_id:
        return False
    return is_temporary_id(widget_id) or widget_id.isdigit()


def generate_temporary_id() -> str:
    return f"{TEMP_ID_PREFIX}{int(time.time() * 1000)}-{secrets.token_hex(5)[:9]}"


def persistent_id(widget_id) -> str:
    """Real id for a widget being written to a live page."""
    if not widget_id or is_temporary_id(widget_id):
        return str(uuid.uuid4())
    return str(widget_id)
