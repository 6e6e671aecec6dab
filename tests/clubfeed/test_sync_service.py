from __future__ import annotations

from typing import List, Optional

import pytest

from clubfeed.errors import InsertError, ParseError, QueryError, TransportError
from clubfeed.models.domain import NewsItem
from clubfeed.repositories.news import NewsStore
from clubfeed.services.sync import SyncService


class FakeFeed:
    def __init__(self, payload: bytes = b"", error: Optional[Exception] = None) -> None:
        self.payload = payload
        self.error = error
        self.requested: List[int] = []

    def fetch(self, max_count: int) -> bytes:
        self.requested.append(max_count)
        if self.error is not None:
            raise self.error
        return self.payload


class BrokenWatermarkStore:
    """Delegates to a real store but fails the watermark query."""

    def __init__(self, inner: NewsStore) -> None:
        self._inner = inner

    def find_max_by_update_timestamp(self):
        raise QueryError("watermark query failed: connection reset")

    def bulk_insert(self, items):
        return self._inner.bulk_insert(items)


BATCH = [(101, "2024-01-01 10:00:00"), (102, "2024-01-01 10:00:01"), (103, "2023-12-31 09:00:00")]


def _ids(items: List[NewsItem]) -> List[int]:
    return sorted(item.news_article_id for item in items)


def test_first_cycle_on_empty_store_inserts_whole_batch(store, make_feed):
    feed = FakeFeed(make_feed(BATCH + [(104, "not a date")]))
    service = SyncService(feed, store, requested_count=5)

    result = service.run_cycle()

    assert feed.requested == [5]
    assert result.fetched == 4
    assert result.inserted == 4
    assert result.watermark is None
    assert _ids(store.find_all()) == [101, 102, 103, 104]


def test_replaying_the_same_batch_does_not_grow_the_store(store, make_feed):
    service = SyncService(FakeFeed(make_feed(BATCH)), store, requested_count=5)

    service.run_cycle()
    for _ in range(3):
        result = service.run_cycle()
        assert result.inserted == 0
        assert result.watermark == "2024-01-01 10:00:01"

    assert store.count() == 3


def test_only_items_after_watermark_are_inserted(store, make_feed):
    store.bulk_insert([NewsItem(news_article_id=1, last_update_date="2024-01-01 10:00:00")])
    service = SyncService(FakeFeed(make_feed(BATCH)), store, requested_count=5)

    result = service.run_cycle()

    assert result.selected == 1
    assert result.inserted == 1
    assert _ids(store.find_all()) == [1, 102]


def test_new_items_appear_on_a_later_poll(store, make_feed):
    feed = FakeFeed(make_feed(BATCH))
    service = SyncService(feed, store, requested_count=5)
    service.run_cycle()

    feed.payload = make_feed([(105, "2024-01-02 08:00:00")] + BATCH[:2])
    result = service.run_cycle()

    assert result.inserted == 1
    assert _ids(store.find_all()) == [101, 102, 103, 105]


def test_parse_failure_aborts_cycle_without_writes(store):
    service = SyncService(FakeFeed(b"<NewListInformation><broken>"), store, requested_count=5)

    with pytest.raises(ParseError):
        service.run_cycle()

    assert store.count() == 0


def test_transport_failure_aborts_cycle_without_writes(store):
    service = SyncService(FakeFeed(error=TransportError("feed returned status 502")), store, requested_count=5)

    with pytest.raises(TransportError):
        service.run_cycle()

    assert store.count() == 0


def test_watermark_query_failure_aborts_by_default(store, make_feed):
    service = SyncService(FakeFeed(make_feed(BATCH)), BrokenWatermarkStore(store), requested_count=5)

    with pytest.raises(QueryError):
        service.run_cycle()

    assert store.count() == 0


def test_watermark_query_failure_fail_open_inserts_whole_batch(store, make_feed):
    service = SyncService(
        FakeFeed(make_feed(BATCH)),
        BrokenWatermarkStore(store),
        requested_count=5,
        watermark_fail_open=True,
    )

    result = service.run_cycle()

    assert result.inserted == 3
    assert result.watermark is None
    assert store.count() == 3


def test_insert_failure_propagates(store, make_feed, monkeypatch):
    def _reject(items):
        raise InsertError("bulk insert rejected")

    monkeypatch.setattr(store, "bulk_insert", _reject)
    service = SyncService(FakeFeed(make_feed(BATCH)), store, requested_count=5)

    with pytest.raises(InsertError):
        service.run_cycle()


def test_dry_run_classifies_without_inserting(store, make_feed):
    service = SyncService(FakeFeed(make_feed(BATCH)), store, requested_count=5)

    result = service.run_cycle(dry_run=True)

    assert result.dry_run
    assert result.selected == 3
    assert result.inserted == 0
    assert store.count() == 0


def test_max_count_override_and_settings_factory(store, settings, make_feed):
    feed = FakeFeed(make_feed([]))
    service = SyncService.from_settings(feed, store, settings)

    service.run_cycle()
    service.run_cycle(max_count=20)

    assert feed.requested == [settings.feed_requested_count, 20]


def test_requested_count_must_be_positive(store):
    with pytest.raises(ValueError):
        SyncService(FakeFeed(), store, requested_count=0)


def test_unreadable_timestamp_from_bootstrap_does_not_block_later_items(store, make_feed):
    feed = FakeFeed(make_feed([(1, "2024-01-01 10:00:00"), (2, "not a date")]))
    service = SyncService(feed, store, requested_count=5)
    service.run_cycle()

    feed.payload = make_feed([(3, "2030-01-01 00:00:00")])
    result = service.run_cycle()

    assert result.watermark == "2024-01-01 10:00:00"
    assert result.inserted == 1
    assert _ids(store.find_all()) == [1, 2, 3]


def test_unpadded_timestamp_does_not_break_convergence(store, make_feed):
    feed = FakeFeed(make_feed([(1, "2024-01-01 10:00:00"), (2, "2024-01-01 9:30:00")]))
    service = SyncService(feed, store, requested_count=5)
    service.run_cycle()

    for _ in range(3):
        result = service.run_cycle()
        assert result.watermark == "2024-01-01 10:00:00"
        assert result.inserted == 0

    assert store.count() == 2


def test_store_holding_only_unreadable_timestamps_still_accepts_new_items(store, make_feed):
    feed = FakeFeed(make_feed([(1, "pending")]))
    service = SyncService(feed, store, requested_count=5)
    service.run_cycle()

    feed.payload = make_feed([(1, "pending"), (2, "2024-01-01 10:00:00")])
    result = service.run_cycle()
    assert result.inserted == 1

    result = service.run_cycle()
    assert result.watermark == "2024-01-01 10:00:00"
    assert result.inserted == 0
    assert _ids(store.find_all()) == [1, 2]
