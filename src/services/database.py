"""
Engine and session management for the Gestio SQLite database.

Every SQLite connection gets foreign keys enforced and WAL journaling. The
driver's implicit transaction handling is switched off and BEGIN is issued by
SQLAlchemy instead, which is what makes SAVEPOINT / ROLLBACK TO reliable:
the package importer wraps each row in a savepoint.

Usage:
    from src.services.database import session_scope

    with session_scope() as session:
        session.add(Warehouse(code="MAG01", description="Sede"))
"""

from contextlib import contextmanager
import logging
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..models.base import Base
from ..utils.config import get_config

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_SessionFactory: Optional[sessionmaker] = None


@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure each new SQLite connection."""
    dbapi_connection.isolation_level = None

    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.close()


@event.listens_for(Engine, "begin")
def _emit_sqlite_begin(conn):
    if conn.dialect.name == "sqlite":
        conn.exec_driver_sql("BEGIN")


def create_database_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Create an engine for the configured (or given) database.

    In-memory URLs share a single connection so that every session sees the
    same database.
    """
    if database_url is None:
        database_url = get_config().database_url

    logger.info(f"Creating database engine: {database_url}")

    if ":memory:" in database_url or "mode=memory" in database_url:
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_engine(
        database_url,
        echo=echo,
        connect_args={"check_same_thread": False, "timeout": get_config().db_timeout},
    )


def init_database(engine: Optional[Engine] = None) -> None:
    """Create missing tables. Safe to call on an existing database."""
    if engine is None:
        engine = get_engine()

    # Registers every model on Base.metadata
    from .. import models  # noqa: F401

    Base.metadata.create_all(engine)
    logger.info("Database tables initialized")


def get_engine(force_recreate: bool = False) -> Engine:
    """Process-wide engine, created on first use."""
    global _engine

    if _engine is None or force_recreate:
        _engine = create_database_engine()

    return _engine


def get_session_factory() -> sessionmaker:
    """Process-wide session factory. Objects stay usable after commit."""
    global _SessionFactory

    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=get_engine(), expire_on_commit=False)

    return _SessionFactory


def get_session() -> Session:
    """Open a new session; the caller commits and closes it."""
    return get_session_factory()()


@contextmanager
def session_scope():
    """
    Transactional scope around a series of operations.

    Commits when the block completes, rolls back and re-raises on any
    exception, and always closes the session.

    Yields:
        Database session
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
