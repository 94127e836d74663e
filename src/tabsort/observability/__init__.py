"""Sort tracing: typed events, a routing dispatcher, a console handler."""

from __future__ import annotations

from tabsort.config import Settings
from tabsort.observability.console import ConsoleTraceHandler
from tabsort.observability.dispatcher import TraceDispatcher, TraceHandler
from tabsort.observability.events import (
    TraceCategory,
    TraceEvent,
    TraceEventType,
)

__all__ = [
    "ConsoleTraceHandler",
    "TraceCategory",
    "TraceDispatcher",
    "TraceEvent",
    "TraceEventType",
    "TraceHandler",
    "initialize_tracing",
]


def initialize_tracing(settings: Settings) -> TraceDispatcher:
    """Dispatcher with the console handler, or none when tracing is off."""
    dispatcher = TraceDispatcher()
    if settings.trace_enabled:
        dispatcher.register(ConsoleTraceHandler())
    return dispatcher
