"""One sync cycle: fetch, parse, resolve watermark, filter, insert."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Sequence

from clubfeed.connectors.parser import parse_feed
from clubfeed.errors import QueryError
from clubfeed.models.domain import FeedBatch, NewsItem, Watermark
from clubfeed.services.novelty import select_new
from clubfeed.services.watermark import WatermarkResolver
from clubfeed.settings import Settings, get_settings
from clubfeed.utils.logging import get_logger

logger = get_logger(__name__)


class FeedFetcher(Protocol):
    def fetch(self, max_count: int) -> bytes: ...  # noqa: D401


class NewsSink(Protocol):
    def find_max_by_update_timestamp(self) -> Watermark: ...  # noqa: D401
    def bulk_insert(self, items: Sequence[NewsItem]) -> int: ...  # noqa: D401


@dataclass(frozen=True)
class CycleResult:
    fetched: int
    selected: int
    inserted: int
    watermark: Optional[str]
    dry_run: bool = False


class SyncService:
    """Runs sync cycles against an explicit feed client and store.

    A cycle either completes or raises a SyncError before anything is
    written; the only write is the final bulk insert.
    """

    def __init__(
        self,
        client: FeedFetcher,
        store: NewsSink,
        *,
        requested_count: int,
        watermark_fail_open: bool = False,
        parser: Callable[[bytes], FeedBatch] = parse_feed,
    ) -> None:
        if requested_count < 1:
            raise ValueError("requested_count must be positive")
        self._client = client
        self._store = store
        self._resolver = WatermarkResolver(store)
        self._requested_count = requested_count
        self._fail_open = watermark_fail_open
        self._parse = parser

    @classmethod
    def from_settings(cls, client: FeedFetcher, store: NewsSink, settings: Settings | None = None) -> "SyncService":
        cfg = settings or get_settings()
        return cls(
            client,
            store,
            requested_count=int(cfg.feed_requested_count),
            watermark_fail_open=cfg.watermark_fail_open,
        )

    def run_cycle(self, *, max_count: Optional[int] = None, dry_run: bool = False) -> CycleResult:
        trace_id = str(uuid.uuid4())
        count = self._requested_count if max_count is None else max_count
        logger.info("sync.cycle.start", extra={"trace_id": trace_id, "count": count})

        raw = self._client.fetch(count)
        batch = self._parse(raw)
        watermark = self._resolve_watermark(trace_id)
        fresh = select_new(batch.items, watermark)

        inserted = 0
        if fresh and not dry_run:
            inserted = self._store.bulk_insert(fresh)

        result = CycleResult(
            fetched=len(batch.items),
            selected=len(fresh),
            inserted=inserted,
            watermark=watermark.timestamp,
            dry_run=dry_run,
        )
        logger.info(
            "sync.cycle.done",
            extra={
                "trace_id": trace_id,
                "club": batch.club_name,
                "fetched": result.fetched,
                "selected": result.selected,
                "inserted": result.inserted,
                "watermark": result.watermark,
                "dry_run": dry_run,
            },
        )
        return result

    def _resolve_watermark(self, trace_id: str) -> Watermark:
        try:
            return self._resolver.current_watermark()
        except QueryError as exc:
            if not self._fail_open:
                raise
            # whole batch will be treated as new; duplicates are possible
            logger.warning("sync.watermark.fail_open", extra={"trace_id": trace_id, "error": str(exc)})
            return Watermark.empty()
