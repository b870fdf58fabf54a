import logging
import re
import secrets
import string
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

REVISION_HASH_LENGTH = 8
REVISION_HASH_ALPHABET = string.ascii_lowercase + string.digits
DEFAULT_WARN_ATTEMPTS = 100

_HASH_RE = re.compile(r"^[a-z0-9]{8}$")


def generate_revision_hash() -> str:
    """Short git-style label for a revision."""
    return "".join(secrets.choice(REVISION_HASH_ALPHABET) for _ in range(REVISION_HASH_LENGTH))


def is_valid_revision_hash(value) -> bool:
    return isinstance(value, str) and bool(_HASH_RE.match(value))


def allocate_revision_hash(
    existing_hashes: Iterable[str],
    *,
    warn_after: Optional[int] = None,
) -> str:
    """
    Generate a hash not present in ``existing_hashes``.

    Retries without bound; once ``warn_after`` attempts have collided a
    warning is logged, since that only happens if the generator is broken.
    """
    taken = set(existing_hashes)
    threshold = warn_after or DEFAULT_WARN_ATTEMPTS
    attempts = 1
    candidate = generate_revision_hash()

    while candidate in taken:
        if attempts == threshold:
            logger.warning(
                "Revision hash allocation needed %d attempts against %d existing hashes",
                attempts,
                len(taken),
            )
        candidate = generate_revision_hash()
        attempts += 1

    return candidate
