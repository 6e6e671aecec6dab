"""HTTP client for the upstream club news list."""

from __future__ import annotations

from typing import Optional

import httpx

from clubfeed.errors import TransportError
from clubfeed.settings import Settings, get_settings
from clubfeed.utils.logging import get_logger

logger = get_logger(__name__)


class FeedClient:
    """Fetches the raw news list document; does not interpret it.

    One GET per call and no retries. A failed fetch is retried by the
    scheduler on its next tick.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout_seconds: float = 5.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._url = url
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout_seconds)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "FeedClient":
        cfg = settings or get_settings()
        return cls(cfg.feed_url, timeout_seconds=float(cfg.feed_timeout_seconds))

    @property
    def url(self) -> str:
        return self._url

    def fetch(self, max_count: int) -> bytes:
        if max_count < 1:
            raise ValueError("max_count must be positive")

        try:
            resp = self._client.get(self._url, params={"count": max_count})
        except httpx.HTTPError as exc:
            raise TransportError(f"feed request failed: {exc}") from exc

        if not resp.is_success:
            raise TransportError(f"feed returned status {resp.status_code}")

        logger.debug("feed.fetched", extra={"url": self._url, "count": max_count, "bytes": len(resp.content)})
        return resp.content

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "FeedClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()
