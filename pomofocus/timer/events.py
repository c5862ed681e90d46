"""
Engine events — the closed set of things a Notifier can react to.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .modes import IntervalMode


@dataclass(frozen=True)
class IntervalCompleted:
    mode: IntervalMode      # the mode that just finished

    kind = "interval_completed"

    @property
    def message(self) -> str:
        return f"{self.mode.label} completed!"


@dataclass(frozen=True)
class BreakStarted:
    mode: IntervalMode = IntervalMode.SHORT_BREAK

    kind = "break_started"

    @property
    def message(self) -> str:
        return f"{self.mode.label} started"


@dataclass(frozen=True)
class BreakEnded:
    mode: IntervalMode = IntervalMode.WORK

    kind = "break_ended"

    @property
    def message(self) -> str:
        return "Break over, back to work"


TimerEvent = Union[IntervalCompleted, BreakStarted, BreakEnded]
