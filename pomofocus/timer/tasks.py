"""
Task Queue — ordered tasks that each need a number of completed work intervals.

The queue keeps a cursor (current_index) on the task that receives credit when
a work interval finishes. Lookups by an unknown task id are no-ops: ids can
race with deletions coming from the widget.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, List, Optional

MIN_REQUIRED = 1
MAX_REQUIRED = 99


def clamp_required(value: int) -> int:
    return max(MIN_REQUIRED, min(MAX_REQUIRED, int(value)))


def _millis() -> int:
    return time.time_ns() // 1_000_000


@dataclass
class Task:
    id: int
    name: str
    required_intervals: int
    completed_intervals: int = 0
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_complete(self) -> bool:
        return self.completed_intervals >= self.required_intervals

    @property
    def remaining_intervals(self) -> int:
        return self.required_intervals - self.completed_intervals


class TaskQueue:

    def __init__(
        self,
        id_source: Callable[[], int] = _millis,
        now: Callable[[], datetime] = datetime.now,
    ):
        self._tasks: List[Task] = []
        self._current_index: int = 0
        self._id_source = id_source
        self._now = now
        self._last_id: int = 0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def current_index(self) -> int:
        return self._current_index

    def tasks(self) -> List[Task]:
        """Return copies; the queue stays the only owner of its entries."""
        return [replace(t) for t in self._tasks]

    def get(self, task_id: int) -> Optional[Task]:
        task = self._find(task_id)
        return replace(task) if task else None

    def current(self) -> Optional[Task]:
        if not self._tasks:
            return None
        return replace(self._tasks[self._current_index])

    def total_intervals(self) -> int:
        return sum(t.required_intervals for t in self._tasks)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def enqueue(self, name: str, required_intervals: int = 1) -> Optional[Task]:
        name = (name or "").strip()
        if not name:
            return None
        was_empty = not self._tasks
        task = Task(
            id=self._next_id(),
            name=name,
            required_intervals=clamp_required(required_intervals),
            created_at=self._now(),
        )
        self._tasks.append(task)
        if was_empty:
            self._current_index = 0
        return replace(task)

    def credit_current(self) -> Optional[Task]:
        """Credit one interval to the current task; advance (cyclically) once it completes."""
        if not self._tasks:
            return None
        task = self._tasks[self._current_index]
        task.completed_intervals = min(task.completed_intervals + 1, task.required_intervals)
        if task.is_complete:
            self._current_index = (self._current_index + 1) % len(self._tasks)
        return replace(task)

    def toggle_manual(self, task_id: int) -> Optional[Task]:
        """Widget click: add one interval, or reset to zero once the task is full."""
        task = self._find(task_id)
        if task is None:
            return None
        if task.completed_intervals < task.required_intervals:
            task.completed_intervals += 1
        else:
            task.completed_intervals = 0
        return replace(task)

    def set_required(self, task_id: int, required_intervals: int) -> Optional[Task]:
        task = self._find(task_id)
        if task is None or int(required_intervals) < MIN_REQUIRED:
            return None
        task.required_intervals = clamp_required(required_intervals)
        if task.completed_intervals > task.required_intervals:
            task.completed_intervals = task.required_intervals
        return replace(task)

    def remove(self, task_id: int) -> bool:
        position = next(
            (i for i, t in enumerate(self._tasks) if t.id == task_id), None
        )
        if position is None:
            return False
        del self._tasks[position]

        if not self._tasks:
            self._current_index = 0
            return True
        if position <= self._current_index:
            self._current_index = max(0, self._current_index - 1)
        if self._current_index >= len(self._tasks):
            self._current_index = len(self._tasks) - 1
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _find(self, task_id: int) -> Optional[Task]:
        return next((t for t in self._tasks if t.id == task_id), None)

    def _next_id(self) -> int:
        candidate = int(self._id_source())
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate
