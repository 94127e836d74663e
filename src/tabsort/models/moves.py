"""Per-tab outcome of a repositioning attempt."""

from __future__ import annotations

from dataclasses import dataclass

from tabsort.constants import MoveOutcome
from tabsort.models.tab import TabId


@dataclass(frozen=True)
class MoveResult:
    tab_id: TabId
    outcome: MoveOutcome
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == MoveOutcome.MOVED

    @classmethod
    def moved(cls, tab_id: TabId) -> MoveResult:
        return cls(tab_id=tab_id, outcome=MoveOutcome.MOVED)

    @classmethod
    def failed(cls, tab_id: TabId, reason: str) -> MoveResult:
        return cls(tab_id=tab_id, outcome=MoveOutcome.FAILED, reason=reason)
