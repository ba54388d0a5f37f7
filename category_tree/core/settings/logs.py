"""Logging settings read from LOG_* environment variables."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """How the category store logs.

    Example: LOG_LEVEL=debug LOG_JSON_LOGS=false LOG_FILE_PATH=logs/categories.jsonl
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    level: LogLevel = "INFO"
    json_logs: bool = Field(default=True, description="JSON Lines output; plain text otherwise")
    console_enabled: bool = True
    file_path: Path | None = Field(default=None, description="Rotating log file; unset disables it")
    # 1 KiB .. 1 GiB
    file_max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024, le=1024**3)
    file_backup_count: int = Field(default=5, ge=0, le=100)
    include_context: bool = Field(
        default=True,
        description="Copy contextvars-bound fields (category_id, operation, ...) onto records",
    )
    service_name: str = "category-tree"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @property
    def level_int(self) -> int:
        return logging.getLevelName(self.level)

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``configure_logging()``."""
        kwargs = self.model_dump(exclude={"level"})
        kwargs["log_level"] = self.level
        return kwargs
