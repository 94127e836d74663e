"""Pydantic models for tabs and the selection snapshot."""

from __future__ import annotations

from typing import Any, TypeAlias

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from tabsort.constants import HOST_STATUS_MAP, ReadyState

TabId: TypeAlias = int


class Tab(BaseModel):
    """One browser tab as reported by the host. Read-only to the sorter."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: TabId
    index: int = Field(ge=0)
    url: str | None = None
    title: str | None = None
    ready_state: ReadyState = Field(default=ReadyState.READY, alias="status")

    @field_validator("ready_state", mode="before")
    @classmethod
    def _map_host_status(cls, v: Any) -> Any:
        """Accept the host's own status strings ('complete', 'loading')."""
        if isinstance(v, str) and v in HOST_STATUS_MAP:
            return HOST_STATUS_MAP[v]
        return v

    @property
    def is_ready(self) -> bool:
        return self.ready_state == ReadyState.READY


class Selection(BaseModel):
    """Immutable snapshot of the selected tabs, ordered by index.

    ``error`` is set when the host could not enumerate tabs; the
    snapshot is then empty.
    """

    model_config = ConfigDict(frozen=True)

    tabs: tuple[Tab, ...] = ()
    error: str | None = None

    @model_validator(mode="after")
    def _check_tabs(self) -> Selection:
        ids = [t.id for t in self.tabs]
        if len(set(ids)) != len(ids):
            raise ValueError("duplicate tab ids in selection")
        if any(
            a.index > b.index
            for a, b in zip(self.tabs, self.tabs[1:], strict=False)
        ):
            raise ValueError("selection must be ordered by index")
        return self

    @classmethod
    def from_tabs(cls, tabs: list[Tab]) -> Selection:
        """Build a snapshot from tabs in any order."""
        return cls(tabs=tuple(sorted(tabs, key=lambda t: t.index)))

    @classmethod
    def unavailable(cls, reason: str) -> Selection:
        return cls(tabs=(), error=reason)

    @property
    def ids(self) -> list[TabId]:
        return [t.id for t in self.tabs]

    @property
    def rightmost_index(self) -> int:
        """Largest index among the selected tabs."""
        if not self.tabs:
            raise ValueError("empty selection has no rightmost index")
        return self.tabs[-1].index

    def by_id(self) -> dict[TabId, Tab]:
        return {t.id: t for t in self.tabs}

    def __len__(self) -> int:
        return len(self.tabs)
