"""Data models shared by the ordering engine."""

from tabsort.models.dates import AttributeIndex, PartialDate, TabDate
from tabsort.models.moves import MoveResult
from tabsort.models.tab import Selection, Tab, TabId

__all__ = [
    "AttributeIndex",
    "MoveResult",
    "PartialDate",
    "Selection",
    "Tab",
    "TabDate",
    "TabId",
]
