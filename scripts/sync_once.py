"""Run a single feed sync cycle by hand.

Usage:
  uv run -- python scripts/sync_once.py
  uv run -- python scripts/sync_once.py --count 20 --dry-run

Reads configuration from the environment / .env via pydantic settings.
Prints what was fetched, selected and inserted.
"""

from __future__ import annotations

import argparse
from typing import List

from clubfeed.connectors.feed_client import FeedClient
from clubfeed.db.session import create_store_engine
from clubfeed.errors import SyncError
from clubfeed.repositories.news import NewsStore
from clubfeed.services.sync import SyncService
from clubfeed.settings import get_settings
from clubfeed.utils.logging import configure_logging


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run one club news sync cycle")
    parser.add_argument("-n", "--count", type=int, default=None, help="Items to request (default: FEED_REQUESTED_COUNT)")
    parser.add_argument("--dry-run", action="store_true", help="Classify only; do not insert")
    args = parser.parse_args(argv)

    if args.count is not None and args.count < 1:
        parser.error("--count must be positive")

    cfg = get_settings()
    configure_logging(cfg.log_level, json_enabled=cfg.log_json)
    print(
        "Config:",
        {
            "feed_url": cfg.feed_url,
            "count": args.count or int(cfg.feed_requested_count),
            "store": cfg.store_dsn,
            "fail_open": cfg.watermark_fail_open,
        },
    )

    engine = create_store_engine(cfg)
    store = NewsStore.from_engine(engine)
    try:
        store.create_schema()
        with FeedClient.from_settings(cfg) as client:
            service = SyncService.from_settings(client, store, cfg)
            result = service.run_cycle(max_count=args.count, dry_run=args.dry_run)
    except SyncError as exc:
        print(f"Sync failed ({exc.kind}): {exc}")
        return 2
    finally:
        engine.dispose()

    print(
        f"Fetched {result.fetched}, selected {result.selected}, inserted {result.inserted}"
        f" (watermark: {result.watermark or 'none'}{', dry run' if result.dry_run else ''})."
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
