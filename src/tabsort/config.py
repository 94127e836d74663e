"""Environment-based configuration."""

from __future__ import annotations

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings

from tabsort.constants import CHROME_EXTENSION_ID, FIREFOX_EXTENSION_ID

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and environment variables."""

    # Resolver
    ready_timeout_seconds: float = 15.0
    request_timeout_seconds: float = 30.0
    chrome_extension_id: str = CHROME_EXTENSION_ID
    firefox_extension_id: str = FIREFOX_EXTENSION_ID

    # Repositioning
    batch_moves: bool = True

    # Ordering: LC_COLLATE for URL order ("" = take it from the environment)
    collation_locale: str = ""

    # Status badge
    badge_clear_delay_seconds: float = 1.0

    # Logging
    log_level: str = "INFO"
    trace_enabled: bool = True

    @field_validator(
        "ready_timeout_seconds",
        "request_timeout_seconds",
        "badge_clear_delay_seconds",
    )
    @classmethod
    def _validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts and delays must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {v}")
        return level

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
    }
