from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable, Iterator, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from clubfeed.db.session import create_store_engine  # noqa: E402
from clubfeed.repositories.news import NewsStore  # noqa: E402
from clubfeed.settings import Settings, reset_settings_cache  # noqa: E402

_ENV_KEYS = (
    "FEED_URL",
    "FEED_REQUESTED_COUNT",
    "FEED_TIMEOUT_SECONDS",
    "SYNC_INTERVAL_SECONDS",
    "SYNC_ENABLED",
    "WATERMARK_FAIL_OPEN",
    "STORE_DSN",
    "LOG_LEVEL",
    "LOG_JSON",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path: Path):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # keep a developer .env out of the tests
    monkeypatch.chdir(tmp_path)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # the API lifespan reconfigures the root logger
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        FEED_URL="https://feed.example.com/getnewlistinformation",
        STORE_DSN=f"sqlite:///{tmp_path / 'news.db'}",
        SYNC_INTERVAL_SECONDS=0.01,
        SYNC_ENABLED=False,
    )


@pytest.fixture()
def store(settings: Settings) -> Iterator[NewsStore]:
    engine = create_store_engine(settings)
    news_store = NewsStore.from_engine(engine)
    news_store.create_schema()
    yield news_store
    engine.dispose()


def feed_xml(items: Iterable[Tuple[int, str]], *, club: str = "Huddersfield Town") -> bytes:
    """Build a NewListInformation document from (id, last_update_date) pairs."""
    records = "".join(
        f"""
        <NewsletterNewsItem>
          <ArticleURL>https://www.htafc.com/news/{article_id}</ArticleURL>
          <NewsArticleID>{article_id}</NewsArticleID>
          <PublishDate>{stamp}</PublishDate>
          <Taxonomies>First Team</Taxonomies>
          <TeaserText>Teaser {article_id}</TeaserText>
          <ThumbnailImageURL>https://img.example.com/{article_id}.jpg</ThumbnailImageURL>
          <Title>Story {article_id}</Title>
          <OptaMatchId></OptaMatchId>
          <LastUpdateDate>{stamp}</LastUpdateDate>
          <IsPublished>True</IsPublished>
        </NewsletterNewsItem>"""
        for article_id, stamp in items
    )
    return (
        "<?xml version=\"1.0\" encoding=\"utf-8\"?>"
        "<NewListInformation>"
        f"<ClubName>{club}</ClubName>"
        "<ClubWebsiteURL>https://www.htafc.com</ClubWebsiteURL>"
        f"<NewsletterNewsItems>{records}</NewsletterNewsItems>"
        "</NewListInformation>"
    ).encode("utf-8")


@pytest.fixture()
def make_feed():
    return feed_xml
