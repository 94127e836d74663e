"""Pydantic models for dates returned by the companion extension."""

from __future__ import annotations

from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from tabsort.models.tab import Tab, TabId


class PartialDate(BaseModel):
    """A date where any component may be missing."""

    model_config = ConfigDict(frozen=True)

    year: int | None = Field(default=None, ge=1, le=9999)
    month: int | None = Field(default=None, ge=1, le=12)
    day: int | None = Field(default=None, ge=1, le=31)


class TabDate(BaseModel):
    """Date record for one tab (wire names in camelCase)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tab_id: TabId = Field(alias="tabId")
    url: str | None = None
    title: str | None = None
    date_string: str | None = Field(default=None, alias="dateString")
    date: PartialDate | None = None

    @property
    def is_absent(self) -> bool:
        """True when there is no usable year to sort by."""
        return self.date is None or self.date.year is None

    @classmethod
    def fallback(cls, tab: Tab) -> TabDate:
        """Absent-date entry seeded for every selected tab."""
        return cls(tab_id=tab.id, url=tab.url, title=tab.title, date=None)


AttributeIndex: TypeAlias = dict[TabId, TabDate]
