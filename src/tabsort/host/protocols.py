"""Protocol-based host interfaces.

Browser bindings satisfy these protocols structurally (no inheritance).
Test doubles can be plain classes or mocks matching the same signature.
"""

from collections.abc import Callable
from typing import Any, Protocol, TypeAlias

from tabsort.models.tab import Tab, TabId

Unsubscribe: TypeAlias = Callable[[], None]


class TabHost(Protocol):
    @property
    def supports_batch_move(self) -> bool: ...
    async def query_selected(self) -> list[Tab]: ...
    async def move(self, tab_id: TabId, index: int) -> None: ...
    async def move_many(self, tab_ids: list[TabId], index: int) -> None: ...
    async def reload(self, tab_id: TabId) -> None: ...
    def on_ready(
        self, tab_id: TabId, callback: Callable[[], None]
    ) -> Unsubscribe: ...


class MessagePort(Protocol):
    async def request(self, message: dict[str, Any]) -> Any: ...
    def disconnect(self) -> None: ...


class MessagingRuntime(Protocol):
    def connect(self, endpoint_id: str) -> MessagePort | None: ...


class BadgeIndicator(Protocol):
    def set_badge_text(self, text: str) -> None: ...
    def set_badge_color(self, color: str) -> None: ...
    def set_icon(self, path: str) -> None: ...


class StatusSignal(Protocol):
    def report_working(self) -> None: ...
    def report_success(self) -> None: ...
    def report_failure(self) -> None: ...
