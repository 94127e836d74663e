"""Tests for the in-memory host, companion and indicator."""

from __future__ import annotations

import asyncio

import pytest

from tabsort.constants import ReadyState
from tabsort.host.memory import (
    InMemoryTabHost,
    LoggingIndicator,
    StaticDatesPort,
    StaticDatesRuntime,
)
from tabsort.models.dates import PartialDate, TabDate
from tabsort.models.tab import Tab
from tabsort.resilience.errors import MoveFailed, SnapshotUnavailable


def _window(count: int) -> list[Tab]:
    return [Tab(id=i, index=i) for i in range(count)]


class TestInMemoryTabHost:
    @pytest.mark.asyncio
    async def test_query_reports_current_indices(self) -> None:
        host = InMemoryTabHost(_window(4), selected=[0, 3])
        await host.move(3, 0)
        tabs = await host.query_selected()
        assert [(t.id, t.index) for t in tabs] == [(3, 0), (0, 1)]

    @pytest.mark.asyncio
    async def test_out_of_range_move_appends(self) -> None:
        host = InMemoryTabHost(_window(3))
        await host.move(0, -1)
        assert host.order == [1, 2, 0]

    @pytest.mark.asyncio
    async def test_move_unknown_tab(self) -> None:
        host = InMemoryTabHost(_window(2))
        with pytest.raises(MoveFailed):
            await host.move(9, 0)

    @pytest.mark.asyncio
    async def test_query_failure(self) -> None:
        host = InMemoryTabHost(_window(2))
        host.fail_query = RuntimeError("gone")
        with pytest.raises(SnapshotUnavailable):
            await host.query_selected()

    @pytest.mark.asyncio
    async def test_reload_marks_pending_then_ready(self) -> None:
        host = InMemoryTabHost(_window(1), reload_delay=0.01)
        fired: list[bool] = []
        unsubscribe = host.on_ready(0, lambda: fired.append(True))

        await host.reload(0)
        assert host.tab(0).ready_state == ReadyState.PENDING
        await asyncio.sleep(0.05)

        assert host.tab(0).is_ready
        assert fired == [True]
        unsubscribe()
        assert host.listener_count(0) == 0


class TestStaticDatesPort:
    @pytest.mark.asyncio
    async def test_answers_known_and_unknown_ids(self) -> None:
        port = StaticDatesPort(
            {1: TabDate(tab_id=1, date=PartialDate(year=2001))}
        )
        response = await port.request(
            {"action": "get-dates", "tabIds": [1, 2]}
        )
        assert response["data"][0]["tabId"] == 1
        assert response["data"][0]["date"]["year"] == 2001
        assert response["data"][1] == {"tabId": 2, "date": None}

    @pytest.mark.asyncio
    async def test_unknown_action_is_error(self) -> None:
        port = StaticDatesPort({})
        response = await port.request({"action": "get-titles"})
        assert "error" in response

    def test_runtime_endpoint_filter(self) -> None:
        port = StaticDatesPort({})
        runtime = StaticDatesRuntime(port, endpoint_id="abc")
        assert runtime.connect("abc") is port
        assert runtime.connect("xyz") is None
        assert runtime.connected_to == ["abc", "xyz"]


def test_logging_indicator_tracks_latest_values() -> None:
    indicator = LoggingIndicator()
    indicator.set_badge_text("a")
    indicator.set_badge_color("red")
    indicator.set_badge_text("b")
    assert indicator.badge_text == "b"
    assert indicator.badge_color == "red"
    assert indicator.icon is None
