"""Cached settings accessors.

Each loader validates its settings class once per process. Tests that
change DB_* or LOG_* variables call ``clear_settings_cache()`` afterwards,
or build a settings object directly, e.g.
``DatabaseSettings(url="sqlite+aiosqlite:///:memory:")``.
"""

from __future__ import annotations

from functools import lru_cache

from .database import DatabaseSettings
from .logs import LoggingSettings


@lru_cache(maxsize=1)
def get_db_settings() -> DatabaseSettings:
    return DatabaseSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings()


def clear_settings_cache() -> None:
    for loader in (get_db_settings, get_logging_settings):
        loader.cache_clear()
