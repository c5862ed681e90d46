"""
Timer Engine — countdown state machine driving the task queue.

    idle --start--> running --pause--> paused --start/resume--> running
    any  --stop-->  idle
    running --tick (remaining hits 0)--> idle, IntervalCompleted, then auto-switch

Illegal transitions are no-ops that return a Rejection instead of raising.
All mutations are expected on a single thread (the asyncio loop in the
service); start/stop/switch_mode/tick do not commute.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional

from ..clock import Clock, Subscription
from ..notify.base import NullNotifier, Notifier
from .events import BreakEnded, BreakStarted, IntervalCompleted, TimerEvent
from .modes import IntervalMode, ModeCatalog
from .projector import Projection, project_completion
from .tasks import TaskQueue

logger = logging.getLogger(__name__)

PROJECTION_REFRESH_S = 60


class Phase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class Rejection(str, Enum):
    ALREADY_RUNNING = "already_running"
    NOT_RUNNING = "not_running"
    MODE_LOCKED_WHILE_RUNNING = "mode_locked_while_running"


@dataclass
class TimerState:
    mode: IntervalMode
    remaining_seconds: int
    total_seconds: int
    phase: Phase = Phase.IDLE

    @property
    def display(self) -> str:
        minutes, seconds = divmod(self.remaining_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"


@dataclass
class EnginePolicy:
    auto_switch: bool = True
    sound_enabled: bool = True
    animations_enabled: bool = True


class TimerEngine:

    def __init__(
        self,
        catalog: ModeCatalog,
        queue: TaskQueue,
        clock: Clock,
        notifier: Optional[Notifier] = None,
        policy: Optional[EnginePolicy] = None,
        projection_refresh_s: float = PROJECTION_REFRESH_S,
    ):
        self.catalog = catalog
        self.queue = queue
        self.policy = policy or EnginePolicy()
        self._clock = clock
        self._notifier = notifier or NullNotifier()
        self._projection_refresh_s = projection_refresh_s

        duration = catalog.get_duration(IntervalMode.WORK)
        self._state = TimerState(
            mode=IntervalMode.WORK,
            remaining_seconds=duration,
            total_seconds=duration,
        )
        self._tick_sub: Optional[Subscription] = None
        self._refresh_sub: Optional[Subscription] = None
        self._listeners: List[Callable[[TimerState], None]] = []
        self._projection_listeners: List[Callable[[Projection], None]] = []
        self.latest_projection: Projection = self.projection()

        catalog.register_listener(self._on_duration_changed)

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> TimerState:
        return replace(self._state)

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def mode(self) -> IntervalMode:
        return self._state.mode

    def projection(self) -> Projection:
        return project_completion(
            self.queue.tasks(), self.queue.current_index, self.catalog, self._clock.now()
        )

    def refresh_projection(self) -> Projection:
        """Recompute the finish estimate and push it to projection listeners."""
        self.latest_projection = self.projection()
        for listener in self._projection_listeners:
            try:
                listener(self.latest_projection)
            except Exception:
                logger.exception("projection listener failed")
        return self.latest_projection

    def register_listener(self, fn: Callable[[TimerState], None]) -> None:
        """Register a callback(state) called after every tick and transition."""
        self._listeners.append(fn)

    def register_projection_listener(self, fn: Callable[[Projection], None]) -> None:
        self._projection_listeners.append(fn)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self) -> Optional[Rejection]:
        if self._state.phase is Phase.RUNNING:
            logger.info("start ignored: timer already running")
            return Rejection.ALREADY_RUNNING
        if self._state.phase is Phase.IDLE:
            self._state.total_seconds = self._state.remaining_seconds
        self._state.phase = Phase.RUNNING
        self._tick_sub = self._clock.on_tick(self._on_tick)
        self._refresh_sub = self._clock.schedule(self._projection_refresh_s, self._on_refresh)
        logger.debug("timer running: %s %ss left", self._state.mode.value, self._state.remaining_seconds)
        self._publish()
        return None

    def resume(self) -> Optional[Rejection]:
        return self.start()

    def pause(self) -> Optional[Rejection]:
        if self._state.phase is not Phase.RUNNING:
            logger.info("pause ignored: timer is %s", self._state.phase.value)
            return Rejection.NOT_RUNNING
        self._cancel_ticking()
        self._state.phase = Phase.PAUSED
        self._publish()
        return None

    def toggle(self) -> Optional[Rejection]:
        if self._state.phase is Phase.RUNNING:
            return self.pause()
        return self.start()

    def stop(self) -> None:
        self._cancel_ticking()
        self._reset_to_idle()
        self._publish()

    def switch_mode(self, target: IntervalMode) -> Optional[Rejection]:
        if self._state.phase is not Phase.IDLE:
            logger.info("mode switch to %s ignored: timer is %s", target.value, self._state.phase.value)
            return Rejection.MODE_LOCKED_WHILE_RUNNING
        duration = self.catalog.get_duration(target)
        self._state.mode = target
        self._state.remaining_seconds = duration
        self._state.total_seconds = duration
        self._publish()
        return None

    # ------------------------------------------------------------------
    # Clock callbacks
    # ------------------------------------------------------------------

    def _on_tick(self, sub: Subscription) -> None:
        # A callback from a torn-down subscription must never touch state.
        if sub is not self._tick_sub or self._state.phase is not Phase.RUNNING:
            return
        self._state.remaining_seconds = max(0, self._state.remaining_seconds - 1)
        if self._state.remaining_seconds == 0:
            self._complete()
        else:
            self._publish()

    def _on_refresh(self, sub: Subscription) -> None:
        if sub is not self._refresh_sub or self._state.phase is not Phase.RUNNING:
            return
        self.refresh_projection()

    def _on_duration_changed(self, mode: IntervalMode) -> None:
        if mode is self._state.mode and self._state.phase is Phase.IDLE:
            self._reset_to_idle()
            self._publish()
        self.refresh_projection()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _complete(self) -> None:
        finished = self._state.mode
        self._cancel_ticking()
        self._reset_to_idle()
        logger.info("%s interval completed", finished.value)
        self._emit(IntervalCompleted(finished))

        if finished is IntervalMode.WORK and len(self.queue):
            self.queue.credit_current()

        if self.policy.auto_switch:
            if finished is IntervalMode.WORK:
                self.switch_mode(IntervalMode.SHORT_BREAK)
                self._emit(BreakStarted(IntervalMode.SHORT_BREAK))
            else:
                self.switch_mode(IntervalMode.WORK)
                self._emit(BreakEnded(IntervalMode.WORK))
        else:
            self._publish()

        self.refresh_projection()

    def _reset_to_idle(self) -> None:
        duration = self.catalog.get_duration(self._state.mode)
        self._state.phase = Phase.IDLE
        self._state.remaining_seconds = duration
        self._state.total_seconds = duration

    def _cancel_ticking(self) -> None:
        for sub in (self._tick_sub, self._refresh_sub):
            if sub is not None:
                sub.cancel()
        self._tick_sub = None
        self._refresh_sub = None

    def _emit(self, event: TimerEvent) -> None:
        try:
            self._notifier.handle(event, self.policy)
        except Exception:
            logger.exception("notifier failed on %s", event.kind)

    def _publish(self) -> None:
        snapshot = self.state
        for listener in self._listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("timer listener failed")
