import asyncio
import logging
import platform
import signal
import sys

from live_status.config import TRACKED_CHANNELS
from live_status.differ import StatusDiffer
from live_status.handlers import ConsoleEventHandler
from live_status.models import StatusMap
from live_status.orchestrator import LiveStatusService
from live_status.tracked import FavoriteChannels, RecentChannels, TrackedSet

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
    handlers=[logging.StreamHandler(sys.stdout)],
)
log = logging.getLogger("main")


async def main() -> None:
    recents   = RecentChannels()
    favorites = FavoriteChannels()
    for entry in TRACKED_CHANNELS:
        favorites.add(entry["channel"], entry["platform"])

    differ  = StatusDiffer()
    handler = ConsoleEventHandler()
    stopped = asyncio.Event()
    pending: set[asyncio.Task] = set()

    def _on_publish(previous: StatusMap, current: StatusMap) -> None:
        for transition in differ.diff(previous, current):
            task = asyncio.create_task(handler.handle(transition))
            pending.add(task)
            task.add_done_callback(pending.discard)

    async with LiveStatusService.open(TrackedSet(recents, favorites)) as service:
        service.subscribe(_on_publish)
        service.start()

        if not TRACKED_CHANNELS:
            await service.refresh_suggestions()
            for s in service.suggestions:
                log.info("Suggested: %s/%s (%d viewers) %s", s.platform.value, s.channel, s.viewer_count, s.title)

        log.info("Tracking %d channel(s). Press Ctrl+C to stop.", len(TRACKED_CHANNELS))

        if platform.system() != "Windows":
            loop = asyncio.get_running_loop()

            def _shutdown(sig: signal.Signals) -> None:
                log.info("Received %s, shutting down gracefully...", sig.name)
                stopped.set()

            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, _shutdown, sig)

        try:
            await stopped.wait()
        except (asyncio.CancelledError, KeyboardInterrupt):
            log.info("Shutting down...")

    log.info("Monitor stopped.")


if __name__ == "__main__":
    asyncio.run(main())
