"""In-memory host implementations.

List-backed tab strip and dict-backed companion for tests and the CLI.
No browser, no I/O. Failure injection hooks let tests exercise the
degraded paths of the pipeline.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable, Iterable
from typing import Any

from tabsort.constants import GET_DATES_ACTION, ReadyState
from tabsort.host.protocols import Unsubscribe
from tabsort.models.dates import TabDate
from tabsort.models.tab import Tab, TabId
from tabsort.resilience.errors import MoveFailed, SnapshotUnavailable

logger = logging.getLogger(__name__)


class InMemoryTabHost:
    """List-backed TabHost. List order is the window's tab order.

    ``reload_delay`` is how long a reloaded tab takes to become ready;
    ``None`` means it never does.
    """

    def __init__(
        self,
        tabs: Iterable[Tab],
        selected: Iterable[TabId] | None = None,
        *,
        batch_moves: bool = True,
        reload_delay: float | None = 0.0,
    ) -> None:
        ordered = sorted(tabs, key=lambda t: t.index)
        self._order: list[TabId] = [t.id for t in ordered]
        self._tabs: dict[TabId, Tab] = {t.id: t for t in ordered}
        self._selected: set[TabId] = (
            set(selected) if selected is not None else set(self._tabs)
        )
        self._listeners: dict[TabId, list[Callable[[], None]]] = (
            defaultdict(list)
        )
        self._batch_moves = batch_moves
        self.reload_delay = reload_delay
        self.fail_query: Exception | None = None
        self.fail_moves: dict[TabId, Exception] = {}
        self.fail_batch: Exception | None = None
        self.fail_reload: set[TabId] = set()
        self.move_log: list[tuple[TabId, int]] = []
        self.batch_log: list[tuple[list[TabId], int]] = []
        self.reloaded: list[TabId] = []

    @property
    def supports_batch_move(self) -> bool:
        return self._batch_moves

    @property
    def order(self) -> list[TabId]:
        """Current tab ids in window order."""
        return list(self._order)

    def listener_count(self, tab_id: TabId) -> int:
        return len(self._listeners.get(tab_id, []))

    def tab(self, tab_id: TabId) -> Tab:
        return self._current(tab_id)

    async def query_selected(self) -> list[Tab]:
        if self.fail_query is not None:
            raise SnapshotUnavailable(str(self.fail_query))
        return [
            self._current(tid)
            for tid in self._order
            if tid in self._selected
        ]

    async def move(self, tab_id: TabId, index: int) -> None:
        self.move_log.append((tab_id, index))
        if tab_id in self.fail_moves:
            raise self.fail_moves[tab_id]
        if tab_id not in self._tabs:
            raise MoveFailed(tab_id, f"No tab with id: {tab_id}")
        self._order.remove(tab_id)
        self._insert([tab_id], index)

    async def move_many(self, tab_ids: list[TabId], index: int) -> None:
        self.batch_log.append((list(tab_ids), index))
        if self.fail_batch is not None:
            raise self.fail_batch
        missing = [tid for tid in tab_ids if tid not in self._tabs]
        if missing:
            raise MoveFailed(missing[0], f"No tab with id: {missing[0]}")
        for tid in tab_ids:
            self._order.remove(tid)
        self._insert(tab_ids, index)

    async def reload(self, tab_id: TabId) -> None:
        self.reloaded.append(tab_id)
        if tab_id in self.fail_reload:
            raise RuntimeError(f"Cannot reload tab {tab_id}")
        self._tabs[tab_id] = self._tabs[tab_id].model_copy(
            update={"ready_state": ReadyState.PENDING}
        )
        if self.reload_delay is None:
            return
        asyncio.get_running_loop().call_later(
            self.reload_delay, self.mark_ready, tab_id
        )

    def on_ready(
        self, tab_id: TabId, callback: Callable[[], None]
    ) -> Unsubscribe:
        self._listeners[tab_id].append(callback)

        def _unsubscribe() -> None:
            listeners = self._listeners.get(tab_id, [])
            if callback in listeners:
                listeners.remove(callback)

        return _unsubscribe

    def mark_ready(self, tab_id: TabId) -> None:
        """Flip a tab to READY and notify its listeners."""
        self._tabs[tab_id] = self._tabs[tab_id].model_copy(
            update={"ready_state": ReadyState.READY}
        )
        for callback in list(self._listeners.get(tab_id, [])):
            callback()

    def _insert(self, tab_ids: list[TabId], index: int) -> None:
        # -1 and out-of-range indices append, as browsers do
        if index < 0 or index > len(self._order):
            index = len(self._order)
        self._order[index:index] = tab_ids

    def _current(self, tab_id: TabId) -> Tab:
        return self._tabs[tab_id].model_copy(
            update={"index": self._order.index(tab_id)}
        )


class StaticDatesPort:
    """MessagePort answering get-dates from a fixed record table."""

    def __init__(
        self,
        records: dict[TabId, TabDate],
        *,
        response: Any = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self._records = records
        self._response = response
        self._error = error
        self._delay = delay
        self.requests: list[dict[str, Any]] = []
        self.disconnected = False

    async def request(self, message: dict[str, Any]) -> Any:
        self.requests.append(message)
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        if self._response is not None:
            return self._response
        if message.get("action") != GET_DATES_ACTION:
            return {"error": f"unknown action: {message.get('action')}"}
        data = [
            self._records[tid].model_dump(by_alias=True)
            if tid in self._records
            else {"tabId": tid, "date": None}
            for tid in message.get("tabIds", [])
        ]
        return {"data": data}

    def disconnect(self) -> None:
        self.disconnected = True


class StaticDatesRuntime:
    """MessagingRuntime exposing a single endpoint.

    ``port=None`` models a browser where the companion extension is
    not installed.
    """

    def __init__(
        self,
        port: StaticDatesPort | None,
        *,
        endpoint_id: str | None = None,
        connect_error: Exception | None = None,
    ) -> None:
        self._port = port
        self._endpoint_id = endpoint_id
        self._connect_error = connect_error
        self.connected_to: list[str] = []

    def connect(self, endpoint_id: str) -> StaticDatesPort | None:
        self.connected_to.append(endpoint_id)
        if self._connect_error is not None:
            raise self._connect_error
        if self._endpoint_id is not None and endpoint_id != self._endpoint_id:
            return None
        return self._port


class LoggingIndicator:
    """BadgeIndicator that records every call and logs it."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    @property
    def badge_text(self) -> str | None:
        return self._last("text")

    @property
    def badge_color(self) -> str | None:
        return self._last("color")

    @property
    def icon(self) -> str | None:
        return self._last("icon")

    def set_badge_text(self, text: str) -> None:
        self.calls.append(("text", text))
        logger.info("event=badge_text text=%r", text)

    def set_badge_color(self, color: str) -> None:
        self.calls.append(("color", color))
        logger.debug("event=badge_color color=%s", color)

    def set_icon(self, path: str) -> None:
        self.calls.append(("icon", path))
        logger.debug("event=icon path=%s", path)

    def _last(self, kind: str) -> str | None:
        for k, v in reversed(self.calls):
            if k == kind:
                return v
        return None


class RecordingStatus:
    """StatusSignal that remembers the order of signals."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def report_working(self) -> None:
        self.calls.append("working")

    def report_success(self) -> None:
        self.calls.append("success")

    def report_failure(self) -> None:
        self.calls.append("failure")
