# backend/database.py
"""
Database handle for the whole application.

The engine and session factory are built lazily on first use from
``settings.DATABASE_URL`` and reused for the lifetime of the process.
``reset_engine()`` tears them down so the next call rebuilds them, and
``configure_engine()`` points the process at another database (tests,
scripts).
"""
import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()

_engine: Optional[Engine] = None
_SessionFactory: Optional[sessionmaker] = None


def _build_engine(url: str) -> Engine:
    if "sqlite" in url:
        connect_args = {"check_same_thread": False} # SQLite connections are shared across request threads
    else:
        connect_args = {} # nothing extra for PostgreSQL
    return create_engine(url, connect_args=connect_args, echo=settings.SQL_ECHO)


def configure_engine(url: str) -> Engine:
    """Replace the process-wide engine with one bound to ``url``."""
    global _engine, _SessionFactory
    reset_engine()
    _engine = _build_engine(url)
    _SessionFactory = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
    logger.info("Database engine initialised (dialect=%s)", _engine.dialect.name)
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        configure_engine(settings.database_url)
    return _engine


def get_session_factory() -> sessionmaker:
    if _SessionFactory is None:
        configure_engine(settings.database_url)
    return _SessionFactory


def reset_engine() -> None:
    global _engine, _SessionFactory
    if _engine is not None:
        _engine.dispose()
        logger.info("Database engine disposed")
    _engine = None
    _SessionFactory = None


def get_db():
    db: Session = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def init_db():
    # Import models so Base.metadata knows every table
    import models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())
