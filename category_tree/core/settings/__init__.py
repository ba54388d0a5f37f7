"""Pydantic Settings v2 configuration.

Import settings via cached loaders:
    from category_tree.core.settings import get_db_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables (DB_*, LOG_*)
    3. .env file (development only)
"""

from __future__ import annotations

from .database import DatabaseSettings
from .loader import clear_settings_cache, get_db_settings, get_logging_settings
from .logs import LoggingSettings, LogLevel

__all__ = [
    "DatabaseSettings",
    "LogLevel",
    "LoggingSettings",
    "clear_settings_cache",
    "get_db_settings",
    "get_logging_settings",
]
