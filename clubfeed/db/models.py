"""SQLAlchemy models for the news store."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for ORM models."""


class NewsItemRow(Base):
    """Stored news item.

    news_article_id is indexed but deliberately not unique; duplicate
    suppression happens in the novelty filter.
    """

    __tablename__ = "news_items"
    __table_args__ = (
        Index("ix_news_items_article_id", "news_article_id"),
        Index("ix_news_items_last_update", "last_update_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    news_article_id: Mapped[int] = mapped_column(Integer, nullable=False)
    article_url: Mapped[str] = mapped_column(String(2048), nullable=False, default="")
    publish_date: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    taxonomies: Mapped[str] = mapped_column(Text, nullable=False, default="")
    teaser_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    thumbnail_image_url: Mapped[str] = mapped_column(String(2048), nullable=False, default="")
    title: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    opta_match_id: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    # raw upstream string, returned unmodified
    last_update_date: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    # parsed last_update_date; NULL when the raw value is not YYYY-MM-DD HH:MM:SS
    last_update_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False))
    is_published: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
