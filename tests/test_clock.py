"""Tests for the clock sources."""

import asyncio
from datetime import datetime, timedelta

from pomofocus.clock import AsyncioClock, ManualClock


class TestManualClock:
    def test_now_advances(self):
        start = datetime(2024, 3, 1, 10, 0)
        clock = ManualClock(start)
        clock.advance(90)
        assert clock.now() == start + timedelta(seconds=90)

    def test_callbacks_fire_once_per_interval(self):
        clock = ManualClock()
        fired = []
        clock.on_tick(lambda sub: fired.append(clock.now()))
        clock.advance(3)
        assert len(fired) == 3
        assert fired[1] - fired[0] == timedelta(seconds=1)

    def test_cancel_stops_callbacks(self):
        clock = ManualClock()
        fired = []
        sub = clock.on_tick(lambda s: fired.append(1))
        clock.advance(2)
        sub.cancel()
        clock.advance(5)
        assert fired == [1, 1]
        assert not sub.active
        assert clock.pending == 0

    def test_cancel_from_inside_callback(self):
        clock = ManualClock()
        fired = []

        def once(sub):
            fired.append(1)
            sub.cancel()

        clock.on_tick(once)
        clock.advance(10)
        assert fired == [1]


class TestAsyncioClock:
    async def test_ticks_on_running_loop(self):
        clock = AsyncioClock(tick_interval_s=0.01)
        fired = []
        sub = clock.on_tick(lambda s: fired.append(1))
        await asyncio.sleep(0.1)
        sub.cancel()
        count = len(fired)
        assert count >= 2
        await asyncio.sleep(0.03)
        assert len(fired) == count

    async def test_cancel_before_first_tick(self):
        clock = AsyncioClock(tick_interval_s=0.01)
        fired = []
        sub = clock.on_tick(lambda s: fired.append(1))
        sub.cancel()
        await asyncio.sleep(0.03)
        assert fired == []
