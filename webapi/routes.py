from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from clubfeed.errors import QueryError
from clubfeed.repositories.news import NewsStore

from .models import NewsListResponse, NewsResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def store_dependency(request: Request) -> NewsStore:
    return request.app.state.store


StoreDep = Annotated[NewsStore, Depends(store_dependency)]


@router.get("/all-news", response_model=NewsListResponse)
def list_news_route(store: StoreDep) -> NewsListResponse:
    try:
        items = store.find_all()
    except QueryError as exc:
        logger.warning("api.all_news.failed", extra={"error": str(exc)})
        raise HTTPException(status_code=503, detail="Could not load news.") from exc
    return NewsListResponse(message=items)


@router.get("/news", response_model=NewsResponse)
def get_news_route(
    store: StoreDep,
    news_id: Annotated[int, Query(alias="id")],
) -> NewsResponse:
    try:
        item = store.find_by_id(news_id)
    except QueryError as exc:
        logger.warning("api.news.failed", extra={"news_article_id": news_id, "error": str(exc)})
        raise HTTPException(status_code=503, detail="Could not load news item.") from exc
    if item is None:
        raise HTTPException(status_code=404, detail="News item not found.")
    return NewsResponse(message=item)
