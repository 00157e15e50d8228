"""SQLite store for sync-run history.

Every sync run, remote or local, is recorded here so past outcomes can be
listed through the API. The engine is created lazily and the history tables
are created on first use. ``DB_URL`` points the store elsewhere; by default
it lives in ``portfolio_sync.db`` at the project root.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker


class Base(DeclarativeBase):
    """Declarative base shared by the sync history tables."""


_engine = None
_SessionLocal: sessionmaker[Session] | None = None


def get_database_url() -> str:
    """Return ``DB_URL`` if set, else the SQLite file beside the project."""
    env_url = os.getenv("DB_URL")
    if env_url:
        return env_url

    project_root = Path(__file__).resolve().parents[3]
    db_path = project_root / "portfolio_sync.db"
    return URL.create("sqlite", database=str(db_path)).render_as_string(hide_password=False)


def _get_engine() -> Engine:
    global _engine
    if _engine is None:
        # Importing the history models registers their tables on Base.
        from portfolio_sync.data.models import sync_run  # noqa: F401

        engine = create_engine(get_database_url(), echo=False, future=True)
        Base.metadata.create_all(bind=engine)
        _engine = engine
    return _engine


def _get_session_factory() -> sessionmaker[Session]:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            bind=_get_engine(),
            autoflush=False,
            expire_on_commit=False,
        )
    return _SessionLocal


def init_db() -> None:
    """Open the history store early, creating its tables."""
    _get_engine()


def reset_engine() -> None:
    """Dispose the current engine so the next access re-reads DB_URL."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


@contextmanager
def get_session() -> Iterator[Session]:
    """Yield a session that commits on success and rolls back on error."""
    session = _get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
