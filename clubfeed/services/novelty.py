"""Novelty filter: keeps the items that postdate the watermark."""

from __future__ import annotations

from typing import Iterable, List

from clubfeed.models.domain import NewsItem, Watermark, parse_update_timestamp
from clubfeed.utils.logging import get_logger

logger = get_logger(__name__)

__all__ = ["parse_update_timestamp", "select_new"]


def select_new(batch: Iterable[NewsItem], watermark: Watermark) -> List[NewsItem]:
    """Return the items strictly later than the watermark, in batch order.

    Without a watermark every item is new. Items whose timestamp does not
    parse are skipped. An item stamped exactly at the watermark is not new.

    The store only resolves a watermark with an unreadable timestamp when it
    holds no readable one, so in that case every readable candidate is new.
    """
    items = list(batch)
    if not watermark.found:
        return items

    boundary = parse_update_timestamp(watermark.timestamp)
    if boundary is None:
        logger.warning("sync.watermark.unparseable", extra={"last_update_date": watermark.timestamp})

    selected: List[NewsItem] = []
    for item in items:
        stamp = parse_update_timestamp(item.last_update_date)
        if stamp is None:
            continue
        if boundary is None or stamp > boundary:
            selected.append(item)
    return selected
