from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    state_file: Path = Field(default=Path("mental_health_state.txt"), alias="STATE_FILE")
    tracker_config_file: Path = Field(
        default=Path("mental_health_config.txt"),
        alias="TRACKER_CONFIG_FILE",
    )
    log_file: Path = Field(default=Path("logs/tracker.log"))
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

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

    @field_validator("log_file", "state_file", mode="before")
    @classmethod
    def _ensure_parent(cls, value: Path | str) -> Path:
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
        if normalized not in logging.getLevelNamesMapping():
            return "INFO"
        return normalized


@lru_cache
def get_settings() -> Settings:
    """Cached settings accessor."""

    return Settings()
