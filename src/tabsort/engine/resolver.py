"""Resolve a publication date for every selected tab.

The dates come from a companion extension over a request/response
port. Tabs that are still loading are reloaded first and given a
bounded time to become ready; the companion can only read a date off
a page that has finished loading.

Every failure here degrades to "no date" for the affected tabs. The
caller always gets a complete AttributeIndex back.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from tabsort.config import Settings
from tabsort.constants import (
    FIREFOX_UA_MARKER,
    GET_DATES_ACTION,
    DecodeErrorKind,
    WaitOutcome,
)
from tabsort.engine.decode import DecodeError, decode_response
from tabsort.host.protocols import MessagePort, MessagingRuntime, TabHost
from tabsort.models.dates import AttributeIndex, TabDate
from tabsort.models.tab import Selection, Tab, TabId
from tabsort.resilience.errors import (
    ResolverEndpointUnconfigured,
    ResolverError,
    ResolverMalformedResponse,
    ResolverTransportError,
    describe_error,
)

logger = logging.getLogger(__name__)


@dataclass
class ResolveOutcome:
    """Dates for a selection plus what happened while fetching them."""

    index: AttributeIndex
    waits: dict[TabId, WaitOutcome] = field(
        default_factory=lambda: dict[TabId, WaitOutcome]()
    )
    failure: ResolverError | None = None
    endpoint_id: str | None = None

    @property
    def failed(self) -> bool:
        """True for transport or malformed-response failures only."""
        return self.failure is not None and not isinstance(
            self.failure, ResolverEndpointUnconfigured
        )


def resolve_endpoint(user_agent: str, settings: Settings) -> str:
    """Pick the companion's endpoint id for this browser family."""
    if FIREFOX_UA_MARKER in user_agent:
        return settings.firefox_extension_id
    return settings.chrome_extension_id


def seed_index(selection: Selection) -> AttributeIndex:
    """Absent-date entry for every tab in the selection."""
    return {tab.id: TabDate.fallback(tab) for tab in selection.tabs}


class DateResolver:
    """Fetches dates for a selection from the companion extension."""

    def __init__(
        self,
        host: TabHost,
        runtime: MessagingRuntime | None,
        settings: Settings | None = None,
        user_agent: str = "",
    ) -> None:
        self._host = host
        self._runtime = runtime
        self._settings = settings or Settings()
        self._user_agent = user_agent

    async def resolve(self, selection: Selection) -> ResolveOutcome:
        """Wait for pending tabs, then fetch all dates in one request."""
        index = seed_index(selection)
        outcome = ResolveOutcome(index=index)

        pending = [tab for tab in selection.tabs if not tab.is_ready]
        if pending:
            outcome.waits = await self.wait_until_ready(pending)

        try:
            records = await self._fetch(selection.ids, outcome)
        except ResolverEndpointUnconfigured as exc:
            logger.info("event=resolver_unconfigured detail=%s", exc)
            outcome.failure = exc
            return outcome
        except ResolverError as exc:
            logger.warning(
                "event=resolver_failed kind=%s error=%s",
                type(exc).__name__,
                exc,
            )
            outcome.failure = exc
            return outcome

        for record in records:
            if record.tab_id not in index:
                logger.debug(
                    "event=resolver_unknown_tab tab_id=%s", record.tab_id
                )
                continue
            index[record.tab_id] = record

        dated = sum(1 for r in index.values() if not r.is_absent)
        logger.info(
            "event=resolver_done tabs=%d dated=%d", len(index), dated
        )
        return outcome

    async def wait_until_ready(
        self, tabs: list[Tab]
    ) -> dict[TabId, WaitOutcome]:
        """Reload each pending tab and race readiness against the timeout.

        Races run concurrently and are all joined before returning.
        """
        results = await asyncio.gather(
            *(self._reload_and_wait(tab.id) for tab in tabs)
        )
        waits = dict(zip([t.id for t in tabs], results, strict=True))
        timed_out = [
            tid for tid, w in waits.items() if w == WaitOutcome.TIMED_OUT
        ]
        if timed_out:
            logger.warning(
                "event=ready_wait_timeout tab_ids=%s timeout_s=%.1f",
                timed_out,
                self._settings.ready_timeout_seconds,
            )
        return waits

    async def _reload_and_wait(self, tab_id: TabId) -> WaitOutcome:
        ready = asyncio.Event()
        unsubscribe = self._host.on_ready(tab_id, ready.set)
        try:
            try:
                await self._host.reload(tab_id)
            except Exception as exc:
                logger.warning(
                    "event=reload_failed tab_id=%s error=%s",
                    tab_id,
                    describe_error(exc),
                )
                return WaitOutcome.TIMED_OUT

            ready_task = asyncio.create_task(ready.wait())
            timer_task = asyncio.create_task(
                asyncio.sleep(self._settings.ready_timeout_seconds)
            )
            done, pending = await asyncio.wait(
                {ready_task, timer_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

            if ready_task in done:
                return WaitOutcome.RELOADED
            return WaitOutcome.TIMED_OUT
        finally:
            unsubscribe()

    async def _fetch(
        self, tab_ids: list[TabId], outcome: ResolveOutcome
    ) -> list[TabDate]:
        """One batched get-dates round trip. Raises ResolverError."""
        if self._runtime is None:
            raise ResolverEndpointUnconfigured("no messaging runtime")

        endpoint_id = resolve_endpoint(self._user_agent, self._settings)
        outcome.endpoint_id = endpoint_id
        try:
            port = self._runtime.connect(endpoint_id)
        except Exception as exc:
            raise ResolverTransportError(
                f"connect to {endpoint_id} failed: {describe_error(exc)}"
            ) from exc
        if port is None:
            raise ResolverEndpointUnconfigured(
                f"companion {endpoint_id} not installed"
            )

        try:
            payload = await self._request(port, tab_ids)
        finally:
            port.disconnect()

        result = decode_response(payload)
        if isinstance(result, DecodeError):
            if result.kind == DecodeErrorKind.REMOTE_ERROR:
                raise ResolverTransportError(
                    f"companion error: {result.detail}"
                )
            raise ResolverMalformedResponse(
                f"{result.kind.value}: {result.detail}"
            )
        return result.records

    async def _request(
        self, port: MessagePort, tab_ids: list[TabId]
    ) -> object:
        message = {"action": GET_DATES_ACTION, "tabIds": list(tab_ids)}
        logger.debug("event=resolver_request tab_ids=%s", tab_ids)
        try:
            return await asyncio.wait_for(
                port.request(message),
                timeout=self._settings.request_timeout_seconds,
            )
        except Exception as exc:
            raise ResolverTransportError(describe_error(exc)) from exc
