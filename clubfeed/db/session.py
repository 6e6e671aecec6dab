"""Engine and session helpers for the news store."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from clubfeed.settings import Settings, get_settings


def create_store_engine(settings: Settings | None = None) -> Engine:
    """Create an engine for STORE_DSN.

    SQLite engines are shared between the sync thread and request handlers,
    so the same-thread check is disabled; sessions themselves stay per-thread.
    """
    config = settings or get_settings()
    url = make_url(config.store_dsn)
    connect_args = {}
    if url.get_backend_name() == "sqlite":
        connect_args = {"check_same_thread": False}
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(
        config.store_dsn,
        future=True,
        connect_args=connect_args,
        pool_pre_ping=True,
    )


def build_sessionmaker(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
        future=True,
    )


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """Provide a transactional scope for DB operations."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
