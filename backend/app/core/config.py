from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
_TIMEFRAMES = {"weekly", "monthly", "yearly", "all"}


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    log_file: Path = Field(default=Path("logs/flowstats.log"))
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Stats engine
    stats_timezone: str = Field(default="UTC", alias="STATS_TIMEZONE")
    default_timeframe: str = Field(default="all", alias="STATS_DEFAULT_TIMEFRAME")
    max_flows_per_request: int = Field(default=200, alias="STATS_MAX_FLOWS")

    version: str = Field(default_factory=lambda: Settings._load_version())

    @staticmethod
    def _load_version() -> str:
        version_env = os.getenv("VERSION")
        if version_env:
            return version_env
        version_file = Path("VERSION")
        if version_file.exists():
            return version_file.read_text(encoding="utf-8").strip()
        return "0.0.0"

    @field_validator("log_file", mode="before")
    @classmethod
    def _validate_log_file(cls, value: Path | str) -> Path:
        path = Path(value)
        if not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: str | None) -> str:
        if not value:
            return "INFO"
        normalized = str(value).upper()
        if normalized not in _LOG_LEVELS:
            return "INFO"
        return normalized

    @field_validator("stats_timezone", mode="before")
    @classmethod
    def _validate_timezone(cls, value: str | None) -> str:
        if not value:
            return "UTC"
        try:
            ZoneInfo(str(value))
        except (ZoneInfoNotFoundError, ValueError):
            return "UTC"
        return str(value)

    @field_validator("default_timeframe", mode="before")
    @classmethod
    def _validate_timeframe(cls, value: str | None) -> str:
        if not value:
            return "all"
        normalized = str(value).lower()
        if normalized not in _TIMEFRAMES:
            return "all"
        return normalized

    @field_validator("max_flows_per_request", mode="before")
    @classmethod
    def _validate_max_flows(cls, value: int | str | None) -> int:
        if value is None:
            return 200
        return max(int(value), 1)

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.stats_timezone)


@lru_cache
def get_settings() -> Settings:
    """Cached settings accessor."""

    return Settings()
