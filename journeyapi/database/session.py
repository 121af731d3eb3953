import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from sqlalchemy.orm import Session

from journeyapi.database.connection import SessionLocal

logger = logging.getLogger(__name__)


def get_db() -> Iterator[Session]:
    """Request-scoped session for ``Depends``.

    Services commit their own units of work; whatever is still open when
    the request fails is rolled back here.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        if db.in_transaction():
            db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_context(
    session_factory: Callable[[], Session] = SessionLocal,
) -> Iterator[Session]:
    """Session scope for scripts: commit on success, rollback on error"""
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception as e:
        logger.warning(f"Rolling back session: {type(e).__name__}: {e}")
        db.rollback()
        raise
    finally:
        db.close()
