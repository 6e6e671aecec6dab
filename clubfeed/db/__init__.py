"""Database utilities for the news store."""

from .models import Base, NewsItemRow  # noqa: F401
from .session import build_sessionmaker, create_store_engine, session_scope  # noqa: F401

__all__ = [
    "Base",
    "NewsItemRow",
    "build_sessionmaker",
    "create_store_engine",
    "session_scope",
]
