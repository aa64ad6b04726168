"""
Database engine, session management, and base model.

Engines and session factories are built explicitly and handed
to whoever needs them. The application keeps one cached default
(get_session_factory); tests build their own against SQLite.
"""

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, DeclarativeBase

from gl_core.config import get_settings


# --- Base Model Class ---
class Base(DeclarativeBase):
    pass


def build_engine(url: str, **kwargs) -> Engine:
    """
    Create an engine for the given database URL.

    pool_pre_ping=True tests pooled connections before use, so a
    database restart does not surface as a failed posting.
    """
    kwargs.setdefault("pool_pre_ping", get_settings().DB_POOL_PRE_PING)
    return create_engine(url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    """
    Build a session factory bound to an engine.

    autocommit=False: services decide when a unit of work commits.
    autoflush=False: SQL is only sent on explicit flush or commit.
    """
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
    )


@lru_cache()
def get_session_factory() -> sessionmaker:
    """Return the application's default session factory."""
    settings = get_settings()
    return build_session_factory(build_engine(settings.DATABASE_URL))


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """
    Run a block as one database transaction.

    Commits when the block finishes, rolls back and re-raises on
    any exception. A failed posting never leaves a half-written
    journal behind.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally guarantees the session is closed and its
    connection returned to the pool, even if the request fails.
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
