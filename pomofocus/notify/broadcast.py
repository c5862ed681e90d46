"""
Broadcast Notifier — fans timer events, state and projections out to the
browser widgets connected on /timer/ws.

Each subscriber owns a bounded asyncio.Queue; a widget that stops reading
loses messages instead of growing memory.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from typing import Any, Dict, Set

from ..timer.engine import TimerState
from ..timer.projector import Projection
from .base import Notifier, chime_for

logger = logging.getLogger(__name__)

QUEUE_SIZE = 100


def state_payload(state: TimerState) -> Dict[str, Any]:
    return {
        "type": "state",
        "mode": state.mode.value,
        "phase": state.phase.value,
        "remaining_seconds": state.remaining_seconds,
        "total_seconds": state.total_seconds,
        "display": state.display,
    }


def projection_payload(projection: Projection) -> Dict[str, Any]:
    return {
        "type": "projection",
        "remaining_intervals": projection.remaining_intervals,
        "total_intervals": projection.total_intervals,
        "finish_at": projection.finish_at.isoformat() if projection.finish_at else None,
        "all_complete": projection.all_complete,
    }


class BroadcastNotifier(Notifier):

    def __init__(self):
        self._subscribers: Set[asyncio.Queue] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=QUEUE_SIZE)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)

    # ------------------------------------------------------------------
    # Sinks
    # ------------------------------------------------------------------

    def handle(self, event, policy) -> None:
        payload: Dict[str, Any] = {
            "type": "event",
            "event": event.kind,
            "mode": event.mode.value,
            "message": event.message,
            "chime": asdict(chime_for(event)) if policy.sound_enabled else None,
        }
        self.publish(payload)

    def on_state(self, state: TimerState) -> None:
        self.publish(state_payload(state))

    def on_projection(self, projection: Projection) -> None:
        self.publish(projection_payload(projection))

    def publish(self, payload: Dict[str, Any]) -> None:
        for queue in list(self._subscribers):
            try:
                queue.put_nowait(payload)
            except asyncio.QueueFull:
                logger.debug("dropping %s message for a slow subscriber", payload["type"])
