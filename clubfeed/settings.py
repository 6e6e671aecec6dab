"""Configuration models for the feed sync service."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, PositiveFloat, PositiveInt, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment settings for feed sync and the read API."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    feed_url: str = Field(
        "https://www.htafc.com/api/incrowd/getnewlistinformation",
        alias="FEED_URL",
        description="Upstream news list endpoint (count is appended as a query parameter).",
    )
    feed_requested_count: PositiveInt = Field(5, alias="FEED_REQUESTED_COUNT", description="Items requested per fetch (<=100)")
    feed_timeout_seconds: PositiveFloat = Field(5.0, alias="FEED_TIMEOUT_SECONDS", description="Feed request timeout (seconds)")
    sync_interval_seconds: PositiveFloat = Field(3.0, alias="SYNC_INTERVAL_SECONDS", description="Idle time between sync cycles")
    sync_enabled: bool = Field(True, alias="SYNC_ENABLED", description="Start the background sync with the API.")
    watermark_fail_open: bool = Field(
        False,
        alias="WATERMARK_FAIL_OPEN",
        description="Treat a failed watermark query as an empty store instead of aborting the cycle.",
    )
    store_dsn: str = Field(
        "sqlite:///./var/storage/clubfeed.db",
        alias="STORE_DSN",
        description="SQLAlchemy connection string for the news store.",
    )
    log_level: str = Field("INFO", alias="LOG_LEVEL", description="Log level.")
    log_json: bool = Field(False, alias="LOG_JSON", description="Emit logs as JSON lines.")

    @field_validator("feed_url")
    @classmethod
    def _validate_feed_url(cls, value: str) -> str:
        url = value.strip()
        if not url.startswith(("http://", "https://")):
            raise ValueError("FEED_URL must be an http(s) URL.")
        return url

    @field_validator("feed_requested_count")
    @classmethod
    def _validate_requested_count(cls, v: int) -> int:
        if v > 100:
            raise ValueError("FEED_REQUESTED_COUNT must be 100 or less.")
        return v

    @field_validator("store_dsn")
    @classmethod
    def _validate_store_dsn(cls, value: str) -> str:
        if "://" not in value:
            raise ValueError("STORE_DSN must be a valid DSN string.")
        return value


@lru_cache()
def get_settings() -> Settings:
    """Return Settings built from the environment."""
    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc


def reset_settings_cache() -> None:
    """Clear the Settings cache (used by tests)."""
    get_settings.cache_clear()  # type: ignore[attr-defined]
