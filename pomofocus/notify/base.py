"""
Notifier interface — reacts to timer events with sound or visual notices.

Notifiers must never break the engine: NotifierGroup isolates each member and
the engine itself catches anything that escapes handle().
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Tuple

from ..timer.events import BreakEnded, BreakStarted

if TYPE_CHECKING:
    from ..timer.engine import EnginePolicy
    from ..timer.events import TimerEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Chime:
    """Notes for the browser to synthesise: frequencies (Hz) played `spacing_s` apart."""
    frequencies: Tuple[float, ...]
    spacing_s: float
    decay_s: float
    gain: float


COMPLETION_CHIME = Chime(frequencies=(800.0,), spacing_s=0.0, decay_s=0.5, gain=0.3)
BREAK_START_CHIME = Chime(frequencies=(523.25, 659.25, 783.99), spacing_s=0.1, decay_s=0.8, gain=0.2)
BREAK_END_CHIME = Chime(frequencies=(392.00, 493.88, 587.33), spacing_s=0.15, decay_s=1.0, gain=0.25)


def chime_for(event: "TimerEvent") -> Chime:
    if isinstance(event, BreakStarted):
        return BREAK_START_CHIME
    if isinstance(event, BreakEnded):
        return BREAK_END_CHIME
    return COMPLETION_CHIME


class Notifier(ABC):

    @abstractmethod
    def handle(self, event: "TimerEvent", policy: "EnginePolicy") -> None:
        ...


class NullNotifier(Notifier):

    def handle(self, event, policy) -> None:
        return None


class LogNotifier(Notifier):

    def handle(self, event, policy) -> None:
        logger.info("[%s] %s", event.kind, event.message)


class NotifierGroup(Notifier):
    """Fan an event out to several notifiers; one failing does not stop the rest."""

    def __init__(self, notifiers: Iterable[Notifier] = ()):
        self._notifiers: List[Notifier] = list(notifiers)

    def add(self, notifier: Notifier) -> None:
        self._notifiers.append(notifier)

    def handle(self, event, policy) -> None:
        for notifier in self._notifiers:
            try:
                notifier.handle(event, policy)
            except Exception:
                logger.exception("%s failed on %s", type(notifier).__name__, event.kind)

