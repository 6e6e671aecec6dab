from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from sqlalchemy.exc import SQLAlchemyError

from clubfeed.connectors.feed_client import FeedClient
from clubfeed.db.session import create_store_engine
from clubfeed.repositories.news import NewsStore
from clubfeed.scheduler import SyncScheduler
from clubfeed.services.sync import SyncService
from clubfeed.settings import Settings, get_settings
from clubfeed.utils.logging import configure_logging, get_logger

from .models import HealthResponse
from .routes import router

logger = get_logger(__name__)

SCHEDULER_STOP_TIMEOUT_SECONDS = 30.0


def create_app(settings: Settings | None = None, *, store: NewsStore | None = None) -> FastAPI:
    """Build the read API; its lifespan owns the store and the sync scheduler.

    Passing ``store`` skips engine creation (the caller owns that store).
    """
    config = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(config.log_level, json_enabled=config.log_json)
        engine = None
        news_store = store
        if news_store is None:
            engine = create_store_engine(config)
            news_store = NewsStore.from_engine(engine)
        try:
            news_store.create_schema()
        except SQLAlchemyError as exc:
            if engine is not None:
                engine.dispose()
            # cannot serve or sync without a store
            raise RuntimeError(f"Could not initialise the news store: {exc}") from exc

        client = FeedClient.from_settings(config)
        service = SyncService.from_settings(client, news_store, config)
        scheduler = SyncScheduler(service, float(config.sync_interval_seconds))
        app.state.store = news_store
        app.state.scheduler = scheduler
        if config.sync_enabled:
            scheduler.start()
        else:
            logger.info("scheduler.disabled")
        try:
            yield
        finally:
            scheduler.stop(timeout=SCHEDULER_STOP_TIMEOUT_SECONDS)
            client.close()
            if engine is not None:
                engine.dispose()
            logger.info("app.shutdown")

    app = FastAPI(title="Club News Feed API", version="0.1.0", lifespan=lifespan)
    app.include_router(router)

    @app.get("/healthz", tags=["system"], response_model=HealthResponse)
    async def healthcheck(request: Request) -> HealthResponse:
        scheduler = getattr(request.app.state, "scheduler", None)
        return HealthResponse(status="ok", sync_running=bool(scheduler and scheduler.is_running))

    return app


app = create_app()
