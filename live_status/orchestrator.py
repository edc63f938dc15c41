# LiveStatusService: the one shared object consumers get handed.

# Responsibilities:
#   - wire adapters, poller, discovery aggregator and scheduler together
#   - re-check statuses whenever the tracked set grows or shrinks
#   - expose read-only state (statuses, suggestions, busy flags) and the four
#     operations: start, stop, check_now, refresh_suggestions
#
# Lifecycle:
#   Build one instance per process, normally through LiveStatusService.open(),
#   which also owns the aiohttp session. stop() clears the timer; it does not
#   abort a cycle already in flight.

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from live_status.adapters import build_adapters
from live_status.config import DEFAULT_LOCALE, EngineSettings
from live_status.discovery import DiscoveryAggregator
from live_status.http_client import HTTPTransport, open_session
from live_status.models import LiveStatus, Platform, StatusMap, SuggestedStream
from live_status.poller import PublishListener, StatusPoller
from live_status.scheduler import Scheduler
from live_status.tracked import TrackedSet

log = logging.getLogger(__name__)


class LiveStatusService:

    def __init__(
        self,
        tracked: TrackedSet,
        transport: HTTPTransport,
        settings: EngineSettings | None = None,
        locale: Callable[[], str] = lambda: DEFAULT_LOCALE,
    ) -> None:
        self._settings = settings or EngineSettings()
        self._tracked = tracked

        adapters = build_adapters(transport)
        self._poller = StatusPoller(tracked.snapshot, adapters)
        self._discovery = DiscoveryAggregator(
            adapters[Platform.TWITCH], adapters[Platform.KICK], self._settings, locale,
        )
        self._scheduler = Scheduler(self._poller.check_all, self._settings.poll_interval)

        tracked.subscribe(self._on_tracked_changed)

    @classmethod
    @asynccontextmanager
    async def open(
        cls,
        tracked: TrackedSet,
        *,
        settings: EngineSettings | None = None,
        locale: Callable[[], str] = lambda: DEFAULT_LOCALE,
        native: bool | None = None,
    ) -> AsyncIterator["LiveStatusService"]:
        async with open_session(native) as session:
            service = cls(tracked, HTTPTransport(session), settings, locale)
            try:
                yield service
            finally:
                service.close()
                await service.drain()

    # ─── state ────────────────────────────────────────────────────────────

    @property
    def statuses(self) -> StatusMap:
        return self._poller.statuses

    @property
    def suggestions(self) -> tuple[SuggestedStream, ...]:
        return self._discovery.suggestions

    @property
    def is_checking(self) -> bool:
        return self._poller.is_checking

    @property
    def is_loading_suggestions(self) -> bool:
        return self._discovery.is_loading

    @property
    def is_polling(self) -> bool:
        return self._scheduler.running

    def get_status(self, channel: str, platform: Platform | str) -> LiveStatus | None:
        return self._poller.get_status(channel, platform)

    def subscribe(self, listener: PublishListener) -> None:
        self._poller.subscribe(listener)

    # ─── operations ───────────────────────────────────────────────────────

    def start(self) -> None:
        self._scheduler.start()

    def stop(self) -> None:
        self._scheduler.stop()

    async def check_now(self) -> None:
        await self._poller.check_all()

    async def refresh_suggestions(self) -> None:
        await self._discovery.refresh_suggestions()

    def close(self) -> None:
        self.stop()
        self._tracked.unsubscribe(self._on_tracked_changed)

    async def drain(self) -> None:
        await self._scheduler.drain()

    def _on_tracked_changed(self, size: int) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            log.debug("Tracked set changed to %d outside an event loop; next tick picks it up", size)
            return
        log.debug("Tracked set changed to %d channel(s); re-checking", size)
        self._scheduler.fire()
