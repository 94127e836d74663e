"""Order tabs by URL or by resolved date.

Both orders rely on Python's stable sort: tabs with equal keys keep
their snapshot order.

Date order: dated tabs first, earliest to latest; tabs without a
usable year follow in their original relative order. Pairwise, a tab
with a date always sorts before one without, and two undated tabs
compare equal. That rule is transitive, so the key below yields
exactly the same order as sorting with ``compare_temporal``.
"""

from __future__ import annotations

import calendar
import locale
from datetime import date

from tabsort.constants import SortMode
from tabsort.models.dates import AttributeIndex, PartialDate
from tabsort.models.tab import Selection, Tab


def to_comparable_date(partial: PartialDate | None) -> date | None:
    """Point in time for a partial date, or None without a year.

    Missing month or day default to 1; a day past the end of its
    month is clamped to the month's last day.
    """
    if partial is None or partial.year is None:
        return None
    month = partial.month or 1
    last_day = calendar.monthrange(partial.year, month)[1]
    day = min(partial.day or 1, last_day)
    return date(partial.year, month, day)


def url_sort_key(tab: Tab) -> tuple[str, str]:
    """Locale-collated URL; missing URLs sort as the empty string.

    Case is only a tiebreak, so ``alpha`` sorts before ``Zeta`` even under
    the C locale, where capitals collate ahead of every lowercase letter.
    """
    url = tab.url or ""
    return locale.strxfrm(url.casefold()), locale.strxfrm(url)


def compare_temporal(
    a: Tab, b: Tab, index: AttributeIndex
) -> int:
    """Pairwise date comparison (-1, 0, 1)."""
    da = _date_of(a, index)
    db = _date_of(b, index)
    if da is None and db is None:
        return 0
    if da is None:
        return 1
    if db is None:
        return -1
    return (da > db) - (da < db)


def order_by_url(selection: Selection) -> list[Tab]:
    return sorted(selection.tabs, key=url_sort_key)


def order_by_date(
    selection: Selection, index: AttributeIndex
) -> list[Tab]:
    def _key(tab: Tab) -> tuple[bool, date]:
        d = _date_of(tab, index)
        # undated tabs share one key, so the stable sort keeps them in place
        return (d is None, d or date.min)

    return sorted(selection.tabs, key=_key)


def order_tabs(
    selection: Selection,
    mode: SortMode,
    index: AttributeIndex | None = None,
) -> list[Tab]:
    """Dispatch on sort mode. DATE without an index sorts nothing."""
    if mode == SortMode.URL:
        return order_by_url(selection)
    return order_by_date(selection, index or {})


def _date_of(tab: Tab, index: AttributeIndex) -> date | None:
    record = index.get(tab.id)
    if record is None:
        return None
    return to_comparable_date(record.date)
