"""Tests for the trace dispatcher, console handler and bootstrap."""

from __future__ import annotations

import logging

import pytest

from tabsort.config import Settings
from tabsort.observability import initialize_tracing
from tabsort.observability.dispatcher import TraceDispatcher
from tabsort.observability.emitters import (
    emit_error,
    emit_sort_end,
    emit_sort_start,
    emit_stage_end,
)
from tabsort.observability.events import TraceEvent
from tabsort.observability.console import ConsoleTraceHandler


class _Collector:
    def __init__(self, name: str = "collector") -> None:
        self._name = name
        self.events: list[TraceEvent] = []

    @property
    def name(self) -> str:
        return self._name

    async def handle(self, event: TraceEvent) -> None:
        self.events.append(event)


class TestTraceDispatcher:
    @pytest.mark.asyncio
    async def test_emit_fans_out_to_handlers(self) -> None:
        a, b = _Collector("a"), _Collector("b")
        dispatcher = TraceDispatcher()
        dispatcher.register(a)
        dispatcher.register(b)

        await dispatcher.emit(TraceEvent(type="sort_start", trace_id="t1"))

        assert len(a.events) == 1
        assert len(b.events) == 1
        assert a.events[0].trace_id == "t1"

    def test_duplicate_handler_ignored(self) -> None:
        dispatcher = TraceDispatcher()
        dispatcher.register(_Collector())
        dispatcher.register(_Collector())
        assert dispatcher.handler_count == 1

    @pytest.mark.asyncio
    async def test_handler_error_does_not_propagate(self) -> None:
        class BadHandler:
            @property
            def name(self) -> str:
                return "bad"

            async def handle(self, event: TraceEvent) -> None:
                msg = "boom"
                raise RuntimeError(msg)

        good = _Collector()
        dispatcher = TraceDispatcher()
        dispatcher.register(BadHandler())
        dispatcher.register(good)

        await dispatcher.emit(TraceEvent(type="sort_end", trace_id="t1"))
        assert len(good.events) == 1

    @pytest.mark.asyncio
    async def test_handler_only_receives_subscribed_types(self) -> None:
        failures = _Collector("failures")
        everything = _Collector("everything")
        dispatcher = TraceDispatcher()
        dispatcher.register(failures, types=["error"])
        dispatcher.register(everything)

        await emit_sort_start(dispatcher, "t1", "url")
        await emit_error(dispatcher, "t1", "host gone")

        assert [e.type for e in failures.events] == ["error"]
        assert [e.type for e in everything.events] == ["sort_start", "error"]

    @pytest.mark.asyncio
    async def test_handler_error_is_logged_with_trace(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        class Exploding:
            @property
            def name(self) -> str:
                return "exploding"

            async def handle(self, event: TraceEvent) -> None:
                raise RuntimeError("disk full")

        dispatcher = TraceDispatcher()
        dispatcher.register(Exploding())

        with caplog.at_level(logging.WARNING):
            await dispatcher.emit(TraceEvent(type="sort_end", trace_id="t9"))

        assert "handler=exploding" in caplog.text
        assert "trace_id=t9" in caplog.text
        assert "disk full" in caplog.text


class TestEmitters:
    @pytest.mark.asyncio
    async def test_emitters_shape_events(self) -> None:
        collector = _Collector()
        dispatcher = TraceDispatcher()
        dispatcher.register(collector)

        await emit_sort_start(dispatcher, "t1", "date")
        await emit_stage_end(dispatcher, "t1", "resolver", 12.5, False, "x")
        await emit_sort_end(dispatcher, "t1", 40.0, False, None)
        await emit_error(dispatcher, "t1", "kaput")

        start, stage, end, err = collector.events
        assert start.data == {"mode": "date"}
        assert stage.category == "resolver"
        assert stage.data == {"duration_ms": 12.5, "ok": False, "error": "x"}
        assert end.data["success"] is False
        assert err.type == "error"
        assert err.data == {"error": "kaput"}


class TestConsoleHandler:
    @pytest.mark.asyncio
    async def test_stage_line_names_stage_and_rounds_duration(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        dispatcher = TraceDispatcher()
        dispatcher.register(ConsoleTraceHandler())

        with caplog.at_level(logging.INFO):
            await emit_stage_end(
                dispatcher, "abc", "reposition", 3.14159, True
            )

        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert "trace=abc" in record.message
        assert "stage=reposition" in record.message
        assert "duration_ms=3.1" in record.message
        assert "ok=True" in record.message
        assert "error=" not in record.message

    @pytest.mark.asyncio
    async def test_failed_stage_logs_warning(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        dispatcher = TraceDispatcher()
        dispatcher.register(ConsoleTraceHandler())

        with caplog.at_level(logging.INFO):
            await emit_stage_end(
                dispatcher, "abc", "resolver", 20.0, False, "timeout"
            )

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert "stage=resolver" in record.message
        assert "error=timeout" in record.message

    @pytest.mark.asyncio
    async def test_sort_end_omits_missing_skip_reason(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        dispatcher = TraceDispatcher()
        dispatcher.register(ConsoleTraceHandler())

        with caplog.at_level(logging.INFO):
            await emit_sort_end(dispatcher, "abc", 41.25, True, None)

        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert "type=sort_end" in record.message
        assert "success=True" in record.message
        assert "skipped" not in record.message
        assert "stage=" not in record.message


class TestInitializeTracing:
    def test_default_registers_console(self) -> None:
        dispatcher = initialize_tracing(Settings(trace_enabled=True))
        assert dispatcher.handler_count == 1

    def test_trace_disabled_returns_empty(self) -> None:
        dispatcher = initialize_tracing(Settings(trace_enabled=False))
        assert dispatcher.handler_count == 0
