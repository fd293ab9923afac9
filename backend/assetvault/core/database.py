"""
Database configuration and session management
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from typing import Any, Dict
import logging

from assetvault.core.config import settings, DATABASE_URL
from assetvault.models.base import Base

logger = logging.getLogger(__name__)


def build_engine(url: str, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL

    SQLite (used by the test-suite) gets thread-safe connect args and, for
    in-memory databases, a single shared connection.
    """
    kwargs: Dict[str, Any] = {"echo": echo, "pool_pre_ping": True}

    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(pool_recycle=300, pool_size=10, max_overflow=20)

    engine = create_engine(url, **kwargs)

    if url.startswith("sqlite"):
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            """Wait on locks instead of failing when cascade branches overlap"""
            # Transactions are started by the "begin" listener below
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA busy_timeout = 10000")
            cursor.close()

        @event.listens_for(engine, "begin")
        def begin_immediate(conn):
            # Take the write lock up front so concurrent writers queue on busy_timeout
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=bind,
        expire_on_commit=False  # Keep objects accessible after commit
    )


# Create SQLAlchemy engine and session factory
engine = build_engine(DATABASE_URL, echo=settings.DEBUG)
SessionLocal = build_session_factory(engine)


def create_tables(bind: Engine = engine) -> None:
    """
    Create all database tables
    Note: In production, use migrations instead
    """
    try:
        Base.metadata.create_all(bind=bind)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")
        raise
