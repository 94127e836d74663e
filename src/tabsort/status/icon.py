"""Toolbar icon reflecting whether there is anything to sort."""

from __future__ import annotations

import logging

from tabsort.constants import (
    ICON_DARK,
    ICON_DISABLED,
    ICON_LIGHT,
    MIN_SORTABLE_TABS,
)
from tabsort.host.protocols import BadgeIndicator, TabHost
from tabsort.resilience.errors import describe_error

logger = logging.getLogger(__name__)


def icon_for(selected_count: int, dark_mode: bool) -> str:
    """Grey when fewer than two tabs are selected, else themed."""
    if selected_count < MIN_SORTABLE_TABS:
        return ICON_DISABLED
    return ICON_DARK if dark_mode else ICON_LIGHT


async def refresh_icon(
    host: TabHost, indicator: BadgeIndicator, dark_mode: bool = False
) -> str | None:
    """Re-query the selection and update the icon.

    Runs on focus and highlight changes, so errors are logged and
    swallowed; returns the icon set, or None if the query failed.
    """
    try:
        tabs = await host.query_selected()
    except Exception as exc:
        logger.warning(
            "event=icon_refresh_failed error=%s", describe_error(exc)
        )
        return None
    icon = icon_for(len(tabs), dark_mode)
    indicator.set_icon(icon)
    return icon
