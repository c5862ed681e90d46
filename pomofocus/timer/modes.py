"""
Mode Catalog — the three interval kinds and their configured durations.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

MIN_MINUTES = 1
MAX_MINUTES = 120
ADJUST_STEP_MINUTES = 5


class IntervalMode(str, Enum):
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_break(self) -> bool:
        return self is not IntervalMode.WORK

    @classmethod
    def parse(cls, value: str) -> "IntervalMode":
        """Accept enum values as well as the widget's legacy keys."""
        key = (value or "").strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        return cls(key.replace("-", "_"))


_LABELS = {
    IntervalMode.WORK: "Pomodoro",
    IntervalMode.SHORT_BREAK: "Short Break",
    IntervalMode.LONG_BREAK: "Long Break",
}

_ALIASES = {
    "pomodoro": IntervalMode.WORK,
    "focus": IntervalMode.WORK,
}

DEFAULT_MINUTES: Dict[IntervalMode, int] = {
    IntervalMode.WORK: 45,
    IntervalMode.SHORT_BREAK: 15,
    IntervalMode.LONG_BREAK: 30,
}


def clamp_minutes(minutes: int) -> int:
    return max(MIN_MINUTES, min(MAX_MINUTES, int(minutes)))


class ModeCatalog:
    """
    Holds per-mode durations in seconds.

    Listeners registered with register_listener(fn) are called with the
    IntervalMode whose duration changed.
    """

    def __init__(self, minutes: Optional[Mapping[IntervalMode, int]] = None):
        self._seconds: Dict[IntervalMode, int] = {
            mode: clamp_minutes(m) * 60 for mode, m in DEFAULT_MINUTES.items()
        }
        for mode, m in (minutes or {}).items():
            self._seconds[IntervalMode(mode)] = clamp_minutes(m) * 60
        self._listeners: List[Callable[[IntervalMode], None]] = []

    def get_duration(self, mode: IntervalMode) -> int:
        return self._seconds[mode]

    def get_minutes(self, mode: IntervalMode) -> int:
        return self._seconds[mode] // 60

    def set_duration(self, mode: IntervalMode, minutes: int) -> int:
        """Clamp *minutes* into [1, 120], store it and return the stored value."""
        clamped = clamp_minutes(minutes)
        self._seconds[mode] = clamped * 60
        self._notify(mode)
        return clamped

    def adjust(self, mode: IntervalMode, steps: int) -> int:
        return self.set_duration(mode, self.get_minutes(mode) + steps * ADJUST_STEP_MINUTES)

    def as_minutes(self) -> Dict[IntervalMode, int]:
        return {mode: self.get_minutes(mode) for mode in IntervalMode}

    def register_listener(self, fn: Callable[[IntervalMode], None]) -> None:
        self._listeners.append(fn)

    def _notify(self, mode: IntervalMode) -> None:
        for listener in self._listeners:
            try:
                listener(mode)
            except Exception:
                logger.exception("duration listener failed for %s", mode.value)
