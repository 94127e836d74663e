"""Capture the selected tabs as an immutable, index-ordered snapshot."""

from __future__ import annotations

import logging

from tabsort.host.protocols import TabHost
from tabsort.models.tab import Selection
from tabsort.resilience.errors import describe_error

logger = logging.getLogger(__name__)


async def capture(host: TabHost) -> Selection:
    """Return the current selection sorted by index.

    Enumeration failures never raise: they come back as an empty
    selection with ``error`` set, so callers can short-circuit.
    """
    try:
        tabs = await host.query_selected()
        selection = Selection.from_tabs(tabs)
    except Exception as exc:
        reason = describe_error(exc)
        logger.warning("event=snapshot_unavailable error=%s", reason)
        return Selection.unavailable(reason)

    logger.debug(
        "event=snapshot_captured count=%d ids=%s",
        len(selection),
        selection.ids,
    )
    return selection
