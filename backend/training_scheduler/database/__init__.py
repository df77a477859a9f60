"""
Database engine, session factory, and metadata shared across the engine.
"""

from __future__ import annotations

import logging
from typing import Any, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeMeta, Session, declarative_base, sessionmaker

from training_scheduler.core.config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_recycle": 300}


def build_engine(url: str, *, echo: bool = False) -> Engine:
    """Create an engine for the given URL with dialect-appropriate pool options."""
    built = create_engine(url, echo=echo, future=True, **_engine_kwargs(url))

    if url.startswith("sqlite"):
        # SQLite ignores foreign keys unless enabled per connection.
        @event.listens_for(built, "connect")
        def enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
            logger.debug("SQLite foreign key enforcement enabled")

    return built


engine = build_engine(settings.database_url, echo=settings.sql_echo)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

Base: DeclarativeMeta = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Get database session with proper cleanup."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(bind: Engine | None = None) -> None:
    """Create all tables registered on ``Base.metadata``."""
    import training_scheduler.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


__all__ = ["Base", "SessionLocal", "build_engine", "engine", "get_db", "init_db"]
