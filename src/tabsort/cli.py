"""CLI entry point: ``tabsort sort``."""

from __future__ import annotations

import argparse
import asyncio
import json
import locale
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tabsort import __version__
from tabsort.config import Settings
from tabsort.constants import SortMode
from tabsort.host.memory import (
    InMemoryTabHost,
    LoggingIndicator,
    StaticDatesPort,
    StaticDatesRuntime,
)
from tabsort.logging_config import setup_logging
from tabsort.models.dates import TabDate
from tabsort.models.tab import Tab, TabId
from tabsort.observability import initialize_tracing
from tabsort.services.sort_service import SortReport, TabSorter
from tabsort.status.badge import BadgeStatus

logger = logging.getLogger(__name__)


def main() -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.version:
        print(f"tabsort {__version__}")
        return

    if args.command == "sort":
        sys.exit(_run_sort(args))
    else:
        parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="tabsort",
        description=(
            "Sort selected browser tabs by URL or by publication date."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    sort = sub.add_parser(
        "sort",
        help="Sort the selected tabs of a window described in JSON",
    )
    sort.add_argument(
        "window",
        type=str,
        help=(
            "JSON file: {\"tabs\": [...], \"selected\": [ids]} "
            "(selected defaults to all tabs)"
        ),
    )
    sort.add_argument(
        "--by",
        choices=[m.value for m in SortMode],
        default=SortMode.URL.value,
        help="Sort key (default: url)",
    )
    sort.add_argument(
        "--dates",
        default=None,
        help=(
            "JSON file with get-dates records; without it the "
            "companion counts as not installed"
        ),
    )
    sort.add_argument(
        "--user-agent",
        default="",
        help="Browser user-agent, selects the companion endpoint",
    )
    sort.add_argument(
        "--no-batch",
        action="store_true",
        help="Move tabs one at a time instead of in one batch",
    )
    sort.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for loading tabs (default: from settings)",
    )
    sort.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )

    return parser


def _run_sort(args: argparse.Namespace) -> int:
    """Execute the sort command. Returns the process exit code."""
    overrides: dict[str, Any] = {}
    if args.no_batch:
        overrides["batch_moves"] = False
    if args.timeout is not None:
        overrides["ready_timeout_seconds"] = args.timeout
    if args.verbose:
        overrides["log_level"] = "DEBUG"

    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        print(f"Error: invalid settings: {exc}", file=sys.stderr)
        return 2

    setup_logging(settings.log_level)
    if not _apply_collation(settings.collation_locale):
        return 2

    try:
        host = _load_window(Path(args.window))
        runtime = (
            StaticDatesRuntime(StaticDatesPort(_load_dates(Path(args.dates))))
            if args.dates
            else None
        )
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    sorter = TabSorter(
        host,
        BadgeStatus(LoggingIndicator(), settings.badge_clear_delay_seconds),
        runtime=runtime,
        settings=settings,
        user_agent=args.user_agent,
        dispatcher=initialize_tracing(settings),
    )
    report = asyncio.run(sorter.sort(SortMode(args.by)))

    print(json.dumps(_render(host, report), indent=2))
    return 0 if report.success else 1


def _apply_collation(name: str) -> bool:
    """Set LC_COLLATE for URL ordering. False when ``name`` is unusable.

    An empty name adopts the environment's locale; if the environment
    names a locale that is not installed, the current one is kept.
    """
    try:
        locale.setlocale(locale.LC_COLLATE, name)
    except locale.Error as exc:
        if not name:
            logger.warning("event=collation_env_unusable error=%s", exc)
            return True
        print(
            f"Error: invalid settings: collation_locale {name!r}: {exc}",
            file=sys.stderr,
        )
        return False
    logger.debug(
        "event=collation_set locale=%s",
        locale.setlocale(locale.LC_COLLATE),
    )
    return True


def _load_window(path: Path) -> InMemoryTabHost:
    """Read a window description into an in-memory host.

    Raises ValueError (incl. pydantic's ValidationError) on bad input.
    """
    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, list):
        raw = {"tabs": raw}
    tabs = [Tab.model_validate(t) for t in raw.get("tabs", [])]
    selected: list[TabId] | None = raw.get("selected")
    # reloads finish immediately: there is no real page to load
    return InMemoryTabHost(tabs, selected, reload_delay=0.0)


def _load_dates(path: Path) -> dict[TabId, TabDate]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = raw.get("data", [])
    records = [TabDate.model_validate(r) for r in raw]
    return {r.tab_id: r for r in records}


def _render(host: InMemoryTabHost, report: SortReport) -> dict[str, Any]:
    return {
        "success": report.success,
        "mode": report.mode.value,
        "skipped": report.skipped,
        "resolver_failure": report.resolver_failure,
        "order": [
            {"id": tid, "url": host.tab(tid).url} for tid in host.order
        ],
        "failed_moves": [
            {"id": m.tab_id, "reason": m.reason}
            for m in report.failed_moves
        ],
    }


if __name__ == "__main__":
    main()
