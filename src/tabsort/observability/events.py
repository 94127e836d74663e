"""Typed trace events emitted during a sort operation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Literal

TraceEventType = Literal[
    "sort_start",
    "sort_end",
    "stage_end",
    "error",
]

TraceCategory = Literal[
    "sort",
    "snapshot",
    "resolver",
    "reposition",
]


@dataclass(frozen=True)
class TraceEvent:
    """Immutable trace event emitted during a sort operation."""

    type: TraceEventType
    trace_id: str
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(UTC)
    )
    category: TraceCategory = "sort"
    data: dict[str, Any] = field(
        default_factory=lambda: dict[str, Any]()
    )
