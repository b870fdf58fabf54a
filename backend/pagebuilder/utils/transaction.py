from contextlib import contextmanager
from pagebuilder.extensions import db

_DEPTH_KEY = "transaction_depth"

@contextmanager
def transactional():
    """
    Context manager for database transactions.

    Blocks nest: only the outermost block commits, and an exception at any
    level rolls back the whole unit of work.
    """
    info = db.session.info
    depth = info.get(_DEPTH_KEY, 0)
    info[_DEPTH_KEY] = depth + 1
    try:
        yield
        if depth == 0:
            db.session.commit()
    except Exception:
        if depth == 0:
            db.session.rollback()
        raise
    finally:
        info[_DEPTH_KEY] = depth
