"""One running sort per mode.

A repeated keypress or toolbar click while a sort of the same mode is
still moving tabs must not start a second pass over the same window.
The later caller shares the running sort's report instead.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any, TypeAlias

from tabsort.constants import SortMode

if TYPE_CHECKING:
    from tabsort.services.sort_service import SortReport

logger = logging.getLogger(__name__)

SortRun: TypeAlias = "Callable[[], Coroutine[Any, Any, SortReport]]"


class InFlightSorts:
    """Tracks the running sort task for each mode.

    The sort runs as its own task, so a caller that gets cancelled
    does not abort the tab moves other callers are waiting on.
    """

    def __init__(self) -> None:
        self._running: dict[SortMode, asyncio.Task[SortReport]] = {}

    async def run(self, mode: SortMode, start: SortRun) -> SortReport:
        """Start a sort for ``mode``, or join the one already running."""
        task = self._running.get(mode)
        if task is None:
            task = asyncio.create_task(start(), name=f"sort:{mode}")
            self._running[mode] = task
            task.add_done_callback(lambda t: self._forget(mode, t))
        else:
            logger.info("event=sort_joined mode=%s", mode)
        return await asyncio.shield(task)

    def _forget(self, mode: SortMode, task: asyncio.Task[SortReport]) -> None:
        if self._running.get(mode) is task:
            del self._running[mode]

    def is_running(self, mode: SortMode) -> bool:
        return mode in self._running

    @property
    def modes(self) -> list[SortMode]:
        return list(self._running)
