"""Sort orchestration: snapshot, resolve, order, move, report."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field

from tabsort.config import Settings
from tabsort.constants import MIN_SORTABLE_TABS, SortMode
from tabsort.engine.comparator import order_tabs
from tabsort.engine.repositioner import reposition
from tabsort.engine.resolver import DateResolver, ResolveOutcome
from tabsort.engine.snapshot import capture
from tabsort.host.protocols import MessagingRuntime, StatusSignal, TabHost
from tabsort.models.moves import MoveResult
from tabsort.models.tab import Selection, TabId
from tabsort.observability.dispatcher import TraceDispatcher
from tabsort.observability.emitters import (
    emit_error,
    emit_sort_end,
    emit_sort_start,
    emit_stage_end,
)
from tabsort.observability.events import TraceCategory
from tabsort.resilience.inflight import InFlightSorts

logger = logging.getLogger(__name__)


@dataclass
class SortReport:
    """Full result of one sort operation."""

    mode: SortMode
    ordered_ids: list[TabId] = field(
        default_factory=lambda: list[TabId]()
    )
    moves: list[MoveResult] = field(
        default_factory=lambda: list[MoveResult]()
    )
    success: bool = False
    skipped: str | None = None
    resolver_failure: str | None = None
    duration_ms: float = 0.0

    @property
    def failed_moves(self) -> list[MoveResult]:
        return [m for m in self.moves if not m.ok]


class TabSorter:
    """Runs the sort pipeline against one host.

    The host, messaging runtime and status signal are injected so the
    same pipeline drives a real browser binding or an in-memory fake.
    """

    def __init__(
        self,
        host: TabHost,
        status: StatusSignal,
        *,
        runtime: MessagingRuntime | None = None,
        settings: Settings | None = None,
        user_agent: str = "",
        dispatcher: TraceDispatcher | None = None,
    ) -> None:
        self._host = host
        self._status = status
        self._settings = settings or Settings()
        self._dispatcher = dispatcher
        self._resolver = DateResolver(
            host, runtime, self._settings, user_agent
        )
        self._in_flight = InFlightSorts()

    async def sort(self, mode: SortMode) -> SortReport:
        """Sort the selected tabs; a repeat call while one runs joins it."""
        return await self._in_flight.run(mode, lambda: self._run(mode))

    async def _run(self, mode: SortMode) -> SortReport:
        trace_id = uuid.uuid4().hex[:12]
        start = time.monotonic()
        report = SortReport(mode=mode)

        self._status.report_working()
        if self._dispatcher:
            await emit_sort_start(self._dispatcher, trace_id, mode)

        try:
            await self._pipeline(report, trace_id)
        except Exception as exc:
            logger.exception("event=sort_crashed mode=%s", mode)
            report.success = False
            if self._dispatcher:
                await emit_error(self._dispatcher, trace_id, str(exc))

        report.duration_ms = (time.monotonic() - start) * 1000
        if report.success:
            self._status.report_success()
        else:
            self._status.report_failure()

        logger.info(
            "event=sort_done mode=%s success=%s skipped=%s "
            "moved=%d failed=%d duration_ms=%.1f",
            mode,
            report.success,
            report.skipped,
            len(report.moves) - len(report.failed_moves),
            len(report.failed_moves),
            report.duration_ms,
        )
        if self._dispatcher:
            await emit_sort_end(
                self._dispatcher,
                trace_id,
                report.duration_ms,
                report.success,
                report.skipped,
            )
        return report

    async def _pipeline(self, report: SortReport, trace_id: str) -> None:
        t0 = time.monotonic()
        selection = await capture(self._host)
        await self._stage_end(
            trace_id,
            "snapshot",
            t0,
            selection.error is None,
            selection.error,
        )

        if selection.error is not None:
            report.skipped = "snapshot_unavailable"
            report.success = False
            return
        if len(selection) < MIN_SORTABLE_TABS:
            report.skipped = "too_few_tabs"
            report.success = True
            return

        resolved: ResolveOutcome | None = None
        if report.mode == SortMode.DATE:
            t0 = time.monotonic()
            resolved = await self._resolver.resolve(selection)
            failure = str(resolved.failure) if resolved.failed else None
            report.resolver_failure = failure
            await self._stage_end(
                trace_id, "resolver", t0, not resolved.failed, failure
            )

        ordered = order_tabs(
            selection,
            report.mode,
            resolved.index if resolved else None,
        )
        report.ordered_ids = [tab.id for tab in ordered]

        t0 = time.monotonic()
        report.moves = await self._reposition(selection, report.ordered_ids)
        await self._stage_end(
            trace_id,
            "reposition",
            t0,
            not report.failed_moves,
            None,
        )

        report.success = (
            report.resolver_failure is None and not report.failed_moves
        )

    async def _reposition(
        self, selection: Selection, ordered_ids: list[TabId]
    ) -> list[MoveResult]:
        return await reposition(
            self._host,
            selection,
            ordered_ids,
            batch=self._settings.batch_moves,
        )

    async def _stage_end(
        self,
        trace_id: str,
        stage: TraceCategory,
        started: float,
        ok: bool,
        error: str | None,
    ) -> None:
        if not self._dispatcher:
            return
        await emit_stage_end(
            self._dispatcher,
            trace_id,
            stage,
            (time.monotonic() - started) * 1000,
            ok,
            error,
        )
