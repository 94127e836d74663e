"""Typed convenience functions for emitting trace events."""

from __future__ import annotations

from tabsort.observability.dispatcher import TraceDispatcher
from tabsort.observability.events import TraceCategory, TraceEvent


async def emit_sort_start(
    dispatcher: TraceDispatcher,
    trace_id: str,
    mode: str,
) -> None:
    await dispatcher.emit(
        TraceEvent(
            type="sort_start",
            trace_id=trace_id,
            category="sort",
            data={"mode": mode},
        )
    )


async def emit_sort_end(
    dispatcher: TraceDispatcher,
    trace_id: str,
    duration_ms: float,
    success: bool,
    skipped: str | None = None,
) -> None:
    await dispatcher.emit(
        TraceEvent(
            type="sort_end",
            trace_id=trace_id,
            category="sort",
            data={
                "duration_ms": duration_ms,
                "success": success,
                "skipped": skipped,
            },
        )
    )


async def emit_stage_end(
    dispatcher: TraceDispatcher,
    trace_id: str,
    stage: TraceCategory,
    duration_ms: float,
    ok: bool,
    error: str | None = None,
) -> None:
    await dispatcher.emit(
        TraceEvent(
            type="stage_end",
            trace_id=trace_id,
            category=stage,
            data={
                "duration_ms": duration_ms,
                "ok": ok,
                "error": error,
            },
        )
    )


async def emit_error(
    dispatcher: TraceDispatcher,
    trace_id: str,
    error: str,
) -> None:
    await dispatcher.emit(
        TraceEvent(
            type="error",
            trace_id=trace_id,
            category="sort",
            data={"error": error},
        )
    )
