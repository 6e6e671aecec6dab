"""Club news feed sync package bootstrap."""

from .scheduler import SyncScheduler  # noqa: F401
from .settings import Settings, get_settings, reset_settings_cache  # noqa: F401

__all__ = [
    "Settings",
    "SyncScheduler",
    "get_settings",
    "reset_settings_cache",
]
