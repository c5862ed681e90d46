"""
Clock sources — wall-clock time plus repeating scheduled callbacks.

AsyncioClock drives the live service from the running event loop.
ManualClock is advanced explicitly and fires callbacks deterministically;
tests and simulations use it to run a 45-minute interval in microseconds.

Every schedule() call returns a Subscription. cancel() tears the schedule down
before returning, so no further callback from it can run afterwards.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Protocol, Tuple

TickCallback = Callable[["Subscription"], None]


class Subscription(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Clock(Protocol):
    def now(self) -> datetime: ...

    def schedule(self, interval_s: float, callback: TickCallback) -> Subscription: ...

    def on_tick(self, callback: TickCallback) -> Subscription: ...


# ---------------------------------------------------------------------------
# Real time
# ---------------------------------------------------------------------------

class _LoopSubscription:

    def __init__(self, loop: asyncio.AbstractEventLoop, interval_s: float, callback: TickCallback):
        self._loop = loop
        self._interval = interval_s
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._active = True
        self._next_at = loop.time() + interval_s
        self._arm()

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _arm(self) -> None:
        # Anchor on the previous deadline so ticks don't drift with callback latency.
        self._handle = self._loop.call_at(self._next_at, self._fire)

    def _fire(self) -> None:
        if not self._active:
            return
        self._next_at += self._interval
        self._arm()
        self._callback(self)


class AsyncioClock:
    """Schedules on the running asyncio loop; must be used from that loop."""

    def __init__(self, tick_interval_s: float = 1.0):
        self.tick_interval_s = tick_interval_s

    def now(self) -> datetime:
        return datetime.now()

    def schedule(self, interval_s: float, callback: TickCallback) -> _LoopSubscription:
        return _LoopSubscription(asyncio.get_running_loop(), interval_s, callback)

    def on_tick(self, callback: TickCallback) -> _LoopSubscription:
        return self.schedule(self.tick_interval_s, callback)


# ---------------------------------------------------------------------------
# Manual time
# ---------------------------------------------------------------------------

class _ManualSubscription:

    def __init__(self, interval_s: float, callback: TickCallback):
        self.interval_s = interval_s
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False


class ManualClock:
    """
    Usage:
        clock = ManualClock(datetime(2024, 1, 1, 10, 0))
        sub = clock.on_tick(lambda s: ...)
        clock.advance(60)   # fires the callback 60 times, in order
    """

    def __init__(self, start: Optional[datetime] = None, tick_interval_s: float = 1.0):
        self._start = start or datetime(2024, 1, 1, 9, 0)
        self._elapsed = 0.0
        self.tick_interval_s = tick_interval_s
        self._queue: List[Tuple[float, int, _ManualSubscription]] = []
        self._seq = itertools.count()

    def now(self) -> datetime:
        return self._start + timedelta(seconds=self._elapsed)

    def schedule(self, interval_s: float, callback: TickCallback) -> _ManualSubscription:
        sub = _ManualSubscription(interval_s, callback)
        heapq.heappush(self._queue, (self._elapsed + interval_s, next(self._seq), sub))
        return sub

    def on_tick(self, callback: TickCallback) -> _ManualSubscription:
        return self.schedule(self.tick_interval_s, callback)

    @property
    def pending(self) -> int:
        return sum(1 for _, _, sub in self._queue if sub.active)

    def advance(self, seconds: float) -> None:
        target = self._elapsed + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, sub = heapq.heappop(self._queue)
            if not sub.active:
                continue
            self._elapsed = due
            heapq.heappush(self._queue, (due + sub.interval_s, next(self._seq), sub))
            sub.callback(sub)
        self._elapsed = target
