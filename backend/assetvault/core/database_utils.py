"""
Transactional session scopes for services and background jobs
"""

from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text
from contextlib import contextmanager
from typing import Generator, Optional
import logging

from assetvault.core.database import SessionLocal

logger = logging.getLogger(__name__)


@contextmanager
def get_db_session(session_factory: Optional[sessionmaker] = None) -> Generator[Session, None, None]:
    """
    One unit of work: commit when the block finishes, roll back when it raises

    Only database errors are logged; store errors (not found, scope) roll
    back silently and the caller decides what to report.

    Args:
        session_factory: Factory to open the session from; defaults to SessionLocal
    """
    db = (session_factory or SessionLocal)()
    try:
        yield db
        db.commit()
    except Exception as e:
        if isinstance(e, SQLAlchemyError):
            logger.error(f"Database error, transaction rolled back: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def check_database_connection(session_factory: Optional[sessionmaker] = None) -> bool:
    """
    Returns:
        True when a trivial query succeeds on the database behind the factory
    """
    try:
        with get_db_session(session_factory) as db:
            db.execute(text("SELECT 1"))
            backend = db.get_bind().dialect.name
    except SQLAlchemyError as e:
        logger.error(f"Database connection failed: {e}")
        return False
    logger.info(f"Database connection successful ({backend})")
    return True
