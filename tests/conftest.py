"""Shared test fixtures: fast settings, in-memory host pieces."""

from __future__ import annotations

import pytest

from tabsort.config import Settings
from tabsort.host.memory import LoggingIndicator, RecordingStatus


@pytest.fixture
def settings() -> Settings:
    """Settings with short timeouts, isolated from any local .env."""
    return Settings(
        _env_file=None,  # pyright: ignore[reportCallIssue]
        ready_timeout_seconds=0.05,
        request_timeout_seconds=0.5,
        badge_clear_delay_seconds=0.01,
        trace_enabled=False,
    )


@pytest.fixture
def indicator() -> LoggingIndicator:
    return LoggingIndicator()


@pytest.fixture
def status() -> RecordingStatus:
    return RecordingStatus()
