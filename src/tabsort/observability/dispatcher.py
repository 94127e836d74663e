"""Route sort trace events to the handlers that want them."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from tabsort.observability.events import TraceEvent, TraceEventType

logger = logging.getLogger(__name__)


class TraceHandler(Protocol):
    """Receives trace events for one output backend."""

    @property
    def name(self) -> str: ...

    async def handle(self, event: TraceEvent) -> None: ...


@dataclass(frozen=True)
class _Route:
    handler: TraceHandler
    types: frozenset[TraceEventType] | None

    def accepts(self, event: TraceEvent) -> bool:
        return self.types is None or event.type in self.types


class TraceDispatcher:
    """Delivers each event to every handler subscribed to its type.

    A handler that raises is logged and skipped; tracing never fails
    a sort.
    """

    def __init__(self) -> None:
        self._routes: dict[str, _Route] = {}

    def register(
        self,
        handler: TraceHandler,
        types: Iterable[TraceEventType] | None = None,
    ) -> None:
        """Subscribe a handler, to all event types when ``types`` is None.

        A second handler with an already registered name is ignored.
        """
        if handler.name in self._routes:
            logger.debug("event=trace_handler_exists handler=%s", handler.name)
            return
        wanted = frozenset(types) if types is not None else None
        self._routes[handler.name] = _Route(handler, wanted)

    async def emit(self, event: TraceEvent) -> None:
        for route in self._routes.values():
            if not route.accepts(event):
                continue
            try:
                await route.handler.handle(event)
            except Exception as exc:
                logger.warning(
                    "event=trace_handler_error handler=%s trace_type=%s "
                    "trace_id=%s error=%s",
                    route.handler.name,
                    event.type,
                    event.trace_id,
                    exc,
                )

    @property
    def handler_count(self) -> int:
        return len(self._routes)
