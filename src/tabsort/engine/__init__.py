"""Ordering engine: snapshot, date resolution, comparison, moves."""

from tabsort.engine.comparator import order_tabs
from tabsort.engine.repositioner import reposition
from tabsort.engine.resolver import DateResolver, ResolveOutcome
from tabsort.engine.snapshot import capture

__all__ = [
    "DateResolver",
    "ResolveOutcome",
    "capture",
    "order_tabs",
    "reposition",
]
