"""Watermark lookup against the news store."""

from __future__ import annotations

from typing import Protocol

from clubfeed.models.domain import Watermark
from clubfeed.utils.logging import get_logger

logger = get_logger(__name__)


class WatermarkSource(Protocol):
    def find_max_by_update_timestamp(self) -> Watermark: ...  # noqa: D401


class WatermarkResolver:
    """Recomputes the watermark from storage on every call.

    An empty store yields ``Watermark(found=False)``; a failing query
    propagates as QueryError so callers can tell the two apart.
    """

    def __init__(self, store: WatermarkSource) -> None:
        self._store = store

    def current_watermark(self) -> Watermark:
        watermark = self._store.find_max_by_update_timestamp()
        if watermark.found:
            logger.debug(
                "sync.watermark.found",
                extra={"news_article_id": watermark.item.news_article_id, "last_update_date": watermark.timestamp},
            )
        else:
            logger.info("sync.watermark.empty")
        return watermark
