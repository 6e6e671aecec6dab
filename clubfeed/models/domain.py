"""Domain DTOs for the club news sync."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Fixed upstream format of LastUpdateDate; also the ordering key for novelty.
UPDATE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
_CANONICAL_TIMESTAMP = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}")


def parse_update_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a LastUpdateDate string; None unless it is exactly YYYY-MM-DD HH:MM:SS.

    strptime alone also accepts unpadded fields ("9:30:00"), which would not
    order the same way as the stored text.
    """
    if not isinstance(value, str) or _CANONICAL_TIMESTAMP.fullmatch(value) is None:
        return None
    try:
        return datetime.strptime(value, UPDATE_TIMESTAMP_FORMAT)
    except ValueError:
        return None


class NewsItem(BaseModel):
    """One upstream news record, carried through unmodified."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    news_article_id: int = Field(..., description="Feed-assigned identifier (lookup key)")
    article_url: str = ""
    publish_date: str = ""
    taxonomies: str = ""
    teaser_text: str = ""
    thumbnail_image_url: str = ""
    title: str = ""
    opta_match_id: str = ""
    last_update_date: str = Field("", description="YYYY-MM-DD HH:MM:SS")
    is_published: str = ""


class FeedBatch(BaseModel):
    """Items decoded from one fetch, in upstream order. Never persisted."""

    club_name: str = ""
    club_website_url: str = ""
    items: List[NewsItem] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class Watermark:
    """Stored item with the greatest last-update timestamp, if any."""

    item: Optional[NewsItem] = None

    @property
    def found(self) -> bool:
        return self.item is not None

    @property
    def timestamp(self) -> Optional[str]:
        return self.item.last_update_date if self.item is not None else None

    @classmethod
    def empty(cls) -> "Watermark":
        return cls(None)
