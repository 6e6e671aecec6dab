from __future__ import annotations

from pydantic import BaseModel

from clubfeed.models.domain import NewsItem


class NewsListResponse(BaseModel):
    message: list[NewsItem]


class NewsResponse(BaseModel):
    message: NewsItem


class HealthResponse(BaseModel):
    status: str
    sync_running: bool
