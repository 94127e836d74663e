"""Map browser commands and the toolbar click onto sort modes."""

from __future__ import annotations

import logging

from tabsort.constants import (
    COMMAND_SORT_BY_DATE,
    COMMAND_SORT_BY_URL,
    SortMode,
)
from tabsort.services.sort_service import SortReport, TabSorter

logger = logging.getLogger(__name__)

COMMANDS: dict[str, SortMode] = {
    COMMAND_SORT_BY_URL: SortMode.URL,
    COMMAND_SORT_BY_DATE: SortMode.DATE,
}


async def dispatch_command(
    sorter: TabSorter, command: str
) -> SortReport | None:
    """Run the sort bound to ``command``; unknown commands are ignored."""
    mode = COMMANDS.get(command)
    if mode is None:
        logger.warning("event=unknown_command command=%s", command)
        return None
    logger.debug("event=command command=%s mode=%s", command, mode)
    return await sorter.sort(mode)


async def on_action_clicked(sorter: TabSorter) -> SortReport:
    """Toolbar button: sort by date."""
    return await sorter.sort(SortMode.DATE)
