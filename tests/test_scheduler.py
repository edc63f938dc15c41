import asyncio

import pytest

from live_status.scheduler import Scheduler


class CountingTick:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls = 0
        self._error = error

    async def __call__(self) -> None:
        self.calls += 1
        if self._error is not None:
            raise self._error


@pytest.mark.asyncio
class TestScheduler:
    async def test_start_ticks_immediately(self) -> None:
        tick = CountingTick()
        scheduler = Scheduler(tick, interval=60)
        scheduler.start()
        await asyncio.sleep(0)
        assert tick.calls == 1
        assert scheduler.running is True
        scheduler.stop()

    async def test_start_is_idempotent(self) -> None:
        tick = CountingTick()
        scheduler = Scheduler(tick, interval=60)
        scheduler.start()
        scheduler.start()
        await asyncio.sleep(0)
        assert tick.calls == 1
        scheduler.stop()

    async def test_ticks_repeat_on_interval(self) -> None:
        tick = CountingTick()
        scheduler = Scheduler(tick, interval=0.01)
        scheduler.start()
        await asyncio.sleep(0.1)
        scheduler.stop()
        assert tick.calls >= 3

    async def test_stop_prevents_future_ticks(self) -> None:
        tick = CountingTick()
        scheduler = Scheduler(tick, interval=0.01)
        scheduler.start()
        await asyncio.sleep(0)
        scheduler.stop()
        await asyncio.sleep(0.05)
        assert tick.calls == 1
        assert scheduler.running is False

    async def test_stop_is_idempotent(self) -> None:
        scheduler = Scheduler(CountingTick(), interval=60)
        scheduler.stop()
        scheduler.start()
        scheduler.stop()
        scheduler.stop()
        assert scheduler.running is False

    async def test_failing_tick_keeps_timer_alive(self) -> None:
        tick = CountingTick(error=RuntimeError("boom"))
        scheduler = Scheduler(tick, interval=0.01)
        scheduler.start()
        await asyncio.sleep(0.05)
        assert scheduler.running is True
        assert tick.calls >= 2
        scheduler.stop()

    async def test_stop_does_not_abort_running_tick(self) -> None:
        release = asyncio.Event()
        finished = []

        async def slow_tick() -> None:
            await release.wait()
            finished.append(True)

        scheduler = Scheduler(slow_tick, interval=60)
        scheduler.start()
        await asyncio.sleep(0)
        scheduler.stop()
        release.set()
        await scheduler.drain()
        assert finished == [True]

    async def test_restart_after_stop(self) -> None:
        tick = CountingTick()
        scheduler = Scheduler(tick, interval=60)
        scheduler.start()
        scheduler.stop()
        scheduler.start()
        await asyncio.sleep(0)
        assert tick.calls == 2
        scheduler.stop()
