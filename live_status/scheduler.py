import asyncio
import logging
from typing import Awaitable, Callable

from live_status.config import POLL_INTERVAL_SECONDS

log = logging.getLogger(__name__)


class Scheduler:
    """
    Fires `tick` once on start() and then every `interval` seconds.

    Each tick runs as its own task and the timer never waits for it, so a
    slow tick does not delay the next one. Overlap is the tick's problem
    (StatusPoller.check_all is single-flight). No backoff, no jitter.

    stop() only prevents future ticks; a tick already running finishes.
    """

    def __init__(self, tick: Callable[[], Awaitable[None]], interval: float = POLL_INTERVAL_SECONDS) -> None:
        self._tick = tick
        self._interval = interval
        self._timer: asyncio.Task | None = None
        self._inflight: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._timer is not None

    def start(self) -> None:
        if self._timer is not None:
            return
        self.fire()
        self._timer = asyncio.create_task(self._run(), name="live-status-timer")
        log.info("Polling every %ss", self._interval)

    def stop(self) -> None:
        if self._timer is None:
            return
        self._timer.cancel()
        self._timer = None
        log.info("Polling stopped")

    def fire(self) -> None:
        """Run one tick in the background, outside the regular cadence."""
        task = asyncio.create_task(self._guarded_tick())
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def drain(self) -> None:
        """Wait for ticks that are still running (used on shutdown)."""
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.fire()

    async def _guarded_tick(self) -> None:
        try:
            await self._tick()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            # keep the timer alive; the next tick gets a fresh chance
            log.exception("Unexpected error in scheduled tick: %s", exc)
