"""
Store Connection

One engine per process. PostgreSQL when DATABASE_URL is set, otherwise a
SQLite file for local development; ``sqlite://`` gives a throwaway in-memory
store (tests).
"""

import os
import logging
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool

from .models import Base

logger = logging.getLogger(__name__)

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        path = os.getenv("SQLITE_PATH", "portfolio_dev.db")
        logger.warning(f"DATABASE_URL not set, storing documents in SQLite file {path}")
        return f"sqlite:///{path}"

    # postgres:// is not accepted by SQLAlchemy 2
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


def _engine_options(url: str) -> Dict[str, Any]:
    if url.startswith("postgresql"):
        return {
            "poolclass": QueuePool,
            "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
            "max_overflow": 10,
            "pool_recycle": 1800,
            "pool_pre_ping": True,
        }

    options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if url in IN_MEMORY_URLS:
        # every session must see the same in-memory database
        options["poolclass"] = StaticPool
    return options


def create_db_engine(url: Optional[str] = None) -> Engine:
    url = url or get_database_url()
    engine = create_engine(
        url,
        echo=os.getenv("SQL_DEBUG", "false").lower() == "true",
        **_engine_options(url),
    )
    logger.info(f"Document store engine ready ({engine.dialect.name})")
    return engine


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def get_session_factory() -> sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=get_engine(),
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )
    return _session_factory


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency: one session per request.

    Repositories commit their own writes; the session is only closed here.
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def init_db(engine: Optional[Engine] = None, drop_all: bool = False) -> None:
    """Create the collection tables that do not exist yet."""
    engine = engine or get_engine()
    if drop_all:
        logger.warning("Dropping every collection table")
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    logger.info(f"Collections ready: {', '.join(sorted(Base.metadata.tables))}")
