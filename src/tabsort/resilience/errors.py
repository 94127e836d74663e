"""Error taxonomy and classification for the sort pipeline.

Resolver and move failures are caught at their own layer and turned
into degraded data; these types exist so that layer can say *what*
went wrong in logs and per-tab results.
"""

from __future__ import annotations

import asyncio
from enum import Enum

from tabsort.models.tab import TabId


class TabSortError(Exception):
    """Base for all sort pipeline errors."""


class SnapshotUnavailable(TabSortError):
    """The host could not enumerate the selected tabs."""


class ResolverError(TabSortError):
    """Base for failures while resolving tab dates."""


class ResolverTransportError(ResolverError):
    """The messaging channel failed (connect, send, timeout)."""


class ResolverMalformedResponse(ResolverError):
    """The companion answered, but not with a usable ``data`` array."""


class ResolverEndpointUnconfigured(ResolverError):
    """No companion endpoint is available. Not treated as a failure."""


class MoveFailed(TabSortError):
    """A single tab could not be moved."""

    def __init__(self, tab_id: TabId, reason: str) -> None:
        super().__init__(f"tab {tab_id}: {reason}")
        self.tab_id = tab_id
        self.reason = reason


class ErrorClass(Enum):
    TIMEOUT = "timeout"  # deadline exceeded
    DISCONNECTED = "disconnected"  # port closed, receiver missing
    NOT_FOUND = "not_found"  # tab closed mid-operation
    UNKNOWN = "unknown"  # unclassified


def classify_error(error: BaseException) -> ErrorClass:
    """Classify a host or messaging error for logs and move results.

    Checks exception types first, falls back to string matching
    for the untyped errors browser hosts tend to raise.
    """
    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return ErrorClass.TIMEOUT
    if isinstance(error, (ConnectionError, EOFError)):
        return ErrorClass.DISCONNECTED
    if isinstance(error, LookupError):
        return ErrorClass.NOT_FOUND

    msg = str(error).lower()

    if "timeout" in msg or "timed out" in msg:
        return ErrorClass.TIMEOUT
    if (
        "disconnected" in msg
        or "receiving end does not exist" in msg
        or "could not establish connection" in msg
    ):
        return ErrorClass.DISCONNECTED
    if "no tab with id" in msg or "not found" in msg:
        return ErrorClass.NOT_FOUND

    return ErrorClass.UNKNOWN


def describe_error(error: BaseException) -> str:
    """Short ``class: message`` reason string for results and logs."""
    detail = str(error) or type(error).__name__
    return f"{classify_error(error).value}: {detail}"
