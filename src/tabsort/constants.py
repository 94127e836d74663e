"""Shared constants: single source of truth for cross-module values.

StrEnum members are str-compatible, so values can go straight into
wire messages and log lines.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class SortMode(StrEnum):
    """Which key the selected tabs are ordered by."""

    URL = "url"
    DATE = "date"


class ReadyState(StrEnum):
    """Load state of a tab as far as the sorter cares."""

    PENDING = "pending"
    READY = "ready"


class WaitOutcome(StrEnum):
    """Result of racing a tab reload against the readiness timeout."""

    RELOADED = "reloaded"
    TIMED_OUT = "timed_out"


class MoveOutcome(StrEnum):
    """Per-tab result of a repositioning attempt."""

    MOVED = "moved"
    FAILED = "failed"


class DecodeErrorKind(StrEnum):
    """Ways a get-dates response can fail to decode."""

    NO_DATA = "no_data"
    REMOTE_ERROR = "remote_error"
    MALFORMED = "malformed"


# Host status strings mapped onto ReadyState
HOST_STATUS_MAP: dict[str, ReadyState] = {
    "complete": ReadyState.READY,
    "loading": ReadyState.PENDING,
    "unloaded": ReadyState.PENDING,
}

# ── Messaging ────────────────────────────────────────────

GET_DATES_ACTION = "get-dates"
CHROME_EXTENSION_ID = "mljeinehnapbddnpfpjiipnpdaeeemdi"
FIREFOX_EXTENSION_ID = "{cf75506a-2c8d-4c0c-9515-9cb34297ad37}"
FIREFOX_UA_MARKER = "Firefox"

# ── Badge ────────────────────────────────────────────────

BADGE_WORKING_TEXT = "…"
BADGE_SUCCESS_TEXT = "✔"
BADGE_FAILURE_TEXT = "✘"
BADGE_WORKING_COLOR = "hsl(0, 0%, 45%)"
BADGE_SUCCESS_COLOR = "hsl(135, 70%, 30%)"
BADGE_FAILURE_COLOR = "hsl(0, 80%, 40%)"
BADGE_TRANSPARENT = "rgba(0, 0, 0, 0)"

# ── Icons ────────────────────────────────────────────────

ICON_DISABLED = "icons/icon_lightgray.png"
ICON_DARK = "icons/icon_white.png"
ICON_LIGHT = "icons/icon_black.png"

# ── Commands ─────────────────────────────────────────────

COMMAND_SORT_BY_URL = "sort-tabs-by-url"
COMMAND_SORT_BY_DATE = "sort-tabs-by-date"

# ── Misc ─────────────────────────────────────────────────

MIN_SORTABLE_TABS = 2
ERROR_TRUNCATION_CHARS = 200
