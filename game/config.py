"""Runtime configuration read from ``RULERY_*`` environment variables or ``.env``."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rulery.player import OutcomePolicy

from .logging_config import setup_logging

logger = logging.getLogger(__name__)

_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RULERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Single rule document to play with; the built-in rules are used when unset.
    rules_path: Optional[Path] = None
    # Directory of rule documents served by the API.
    rules_dir: Optional[Path] = None

    log_level: str = "INFO"
    outcome_policy: OutcomePolicy = OutcomePolicy.LOSE_FIRST

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LEVELS:
            raise ValueError(f"Unknown log level '{v}'")
        return level


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    setup_logging(settings.log_level)
    logger.info("Settings loaded successfully")
    logger.debug("Rules directory: %s", settings.rules_dir)
    return settings
