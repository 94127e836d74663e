"""Badge-based operation status signal."""

from __future__ import annotations

import asyncio
import logging

from tabsort.constants import (
    BADGE_FAILURE_COLOR,
    BADGE_FAILURE_TEXT,
    BADGE_SUCCESS_COLOR,
    BADGE_SUCCESS_TEXT,
    BADGE_TRANSPARENT,
    BADGE_WORKING_COLOR,
    BADGE_WORKING_TEXT,
)
from tabsort.host.protocols import BadgeIndicator

logger = logging.getLogger(__name__)


class BadgeStatus:
    """Shows working/success/failure on the toolbar badge.

    Success and failure flash for ``clear_delay`` seconds and are then
    cleared. A newer signal cancels a pending clear.
    """

    def __init__(
        self, indicator: BadgeIndicator, clear_delay: float = 1.0
    ) -> None:
        self._indicator = indicator
        self._clear_delay = clear_delay
        self._clear_handle: asyncio.TimerHandle | None = None

    def report_working(self) -> None:
        self._cancel_clear()
        self._show(BADGE_WORKING_TEXT, BADGE_WORKING_COLOR)

    def report_success(self) -> None:
        self._flash(BADGE_SUCCESS_TEXT, BADGE_SUCCESS_COLOR)

    def report_failure(self) -> None:
        self._flash(BADGE_FAILURE_TEXT, BADGE_FAILURE_COLOR)

    @property
    def clear_pending(self) -> bool:
        return self._clear_handle is not None

    def clear(self) -> None:
        self._clear_handle = None
        self._show("", BADGE_TRANSPARENT)

    def _flash(self, text: str, color: str) -> None:
        self._cancel_clear()
        self._show(text, color)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop to schedule on; leave the badge up.
            logger.debug("event=badge_clear_skipped reason=no_loop")
            return
        self._clear_handle = loop.call_later(self._clear_delay, self.clear)

    def _show(self, text: str, color: str) -> None:
        self._indicator.set_badge_text(text)
        self._indicator.set_badge_color(color)

    def _cancel_clear(self) -> None:
        if self._clear_handle is not None:
            self._clear_handle.cancel()
            self._clear_handle = None
