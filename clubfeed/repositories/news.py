"""Store gateway: the only code that reads or writes news_items."""

from __future__ import annotations

from typing import List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from clubfeed.db.models import Base, NewsItemRow
from clubfeed.db.session import build_sessionmaker, session_scope
from clubfeed.errors import InsertError, QueryError
from clubfeed.models.domain import NewsItem, Watermark, parse_update_timestamp


def _to_row(item: NewsItem) -> NewsItemRow:
    return NewsItemRow(**item.model_dump(), last_update_at=parse_update_timestamp(item.last_update_date))


def _to_item(row: NewsItemRow) -> NewsItem:
    return NewsItem.model_validate(row)


class NewsStore:
    """Bulk insert plus point and aggregate queries over stored news items."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @classmethod
    def from_engine(cls, engine: Engine) -> "NewsStore":
        return cls(build_sessionmaker(engine))

    def create_schema(self) -> None:
        engine = self._session_factory.kw["bind"]
        Base.metadata.create_all(bind=engine)

    def bulk_insert(self, items: Sequence[NewsItem]) -> int:
        """Insert all items in one transaction; nothing is written on failure."""
        if not items:
            return 0
        try:
            with session_scope(self._session_factory) as session:
                session.add_all([_to_row(item) for item in items])
        except SQLAlchemyError as exc:
            raise InsertError(f"bulk insert of {len(items)} items rejected: {exc}") from exc
        return len(items)

    def find_max_by_update_timestamp(self) -> Watermark:
        # readable timestamps first; an unreadable row is only the watermark
        # when nothing readable is stored
        stmt = (
            select(NewsItemRow)
            .order_by(NewsItemRow.last_update_at.desc().nulls_last(), NewsItemRow.id.desc())
            .limit(1)
        )
        try:
            with self._session_factory() as session:
                row = session.execute(stmt).scalars().first()
                if row is None:
                    return Watermark.empty()
                return Watermark(_to_item(row))
        except SQLAlchemyError as exc:
            raise QueryError(f"watermark query failed: {exc}") from exc

    def find_by_id(self, news_article_id: int) -> Optional[NewsItem]:
        stmt = (
            select(NewsItemRow)
            .where(NewsItemRow.news_article_id == news_article_id)
            .order_by(NewsItemRow.id)
            .limit(1)
        )
        try:
            with self._session_factory() as session:
                row = session.execute(stmt).scalars().first()
                return _to_item(row) if row is not None else None
        except SQLAlchemyError as exc:
            raise QueryError(f"lookup of news {news_article_id} failed: {exc}") from exc

    def find_all(self) -> List[NewsItem]:
        stmt = select(NewsItemRow).order_by(NewsItemRow.id)
        try:
            with self._session_factory() as session:
                return [_to_item(row) for row in session.execute(stmt).scalars()]
        except SQLAlchemyError as exc:
            raise QueryError(f"listing news failed: {exc}") from exc

    def count(self) -> int:
        stmt = select(func.count()).select_from(NewsItemRow)
        try:
            with self._session_factory() as session:
                return int(session.execute(stmt).scalar_one())
        except SQLAlchemyError as exc:
            raise QueryError(f"counting news failed: {exc}") from exc
