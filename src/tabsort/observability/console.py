"""Log sort trace events as one key=value line each."""

from __future__ import annotations

import logging
from typing import Any

from tabsort.observability.events import TraceEvent

logger = logging.getLogger(__name__)


def _fmt(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.1f}"
    return str(value)


class ConsoleTraceHandler:
    """Writes trace events to the ``tabsort.observability`` logger.

    Failed stages, failed sorts and errors log at WARNING so they show
    up at the default level. Fields that are None are left out.
    """

    @property
    def name(self) -> str:
        return "console"

    async def handle(self, event: TraceEvent) -> None:
        parts = [f"trace={event.trace_id}", f"type={event.type}"]
        if event.type == "stage_end":
            parts.append(f"stage={event.category}")
        parts.extend(
            f"{k}={_fmt(v)}" for k, v in event.data.items() if v is not None
        )
        logger.log(_level_for(event), " ".join(parts))


def _level_for(event: TraceEvent) -> int:
    if event.type == "error":
        return logging.WARNING
    if event.data.get("ok") is False or event.data.get("success") is False:
        return logging.WARNING
    return logging.INFO
