from flask import request
from dateutil.parser import parse
from pagebuilder.domain.exceptions import ConcurrentModification, ValidationFailure
from pagebuilder.utils.versioning import parse_timestamp


def enforce_optimistic_lock(page):
    """
    Enforces optimistic locking using the If-Unmodified-Since header.
    Raises ConcurrentModification if the page has been modified since.
    """
    client_ts = request.headers.get("If-Unmodified-Since")
    if not client_ts:
        return  # No optimistic lock requested

    try:
        client_ts = parse_timestamp(parse(client_ts))
    except (ValueError, OverflowError) as exc:
        raise ValidationFailure("Invalid If-Unmodified-Since header", page_id=page.id) from exc

    server_ts = parse_timestamp(page.updated_at)

    # HTTP dates carry whole seconds only
    if server_ts is not None and server_ts.replace(microsecond=0) > client_ts:
        raise ConcurrentModification(
            "Conflict detected. Page has been modified.",
            page_id=page.id,
            updated_at=server_ts.isoformat(),
        )
