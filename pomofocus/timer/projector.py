"""
Completion Projector — estimated wall-clock finish time for the remaining tasks.

Breaks are interleaved between work intervals but not after the last one:

    finish = now + n * work + max(0, n - 1) * short_break

Stateless; callers re-run it whenever task counts, durations or the clock change.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence

from .modes import IntervalMode, ModeCatalog
from .tasks import Task


@dataclass(frozen=True)
class Projection:
    remaining_intervals: int
    total_intervals: int
    finish_at: Optional[datetime]     # None once every task is complete
    computed_at: datetime

    @property
    def all_complete(self) -> bool:
        return self.finish_at is None


def remaining_work_intervals(tasks: Sequence[Task], current_index: int) -> int:
    return sum(
        max(0, t.remaining_intervals)
        for t in tasks[current_index:]
    )


def project_completion(
    tasks: Sequence[Task],
    current_index: int,
    catalog: ModeCatalog,
    now: datetime,
) -> Projection:
    remaining = remaining_work_intervals(tasks, current_index)
    total = sum(t.required_intervals for t in tasks)
    if remaining <= 0:
        return Projection(remaining_intervals=0, total_intervals=total,
                          finish_at=None, computed_at=now)

    work = catalog.get_duration(IntervalMode.WORK)
    brk = catalog.get_duration(IntervalMode.SHORT_BREAK)
    seconds = remaining * work + max(0, remaining - 1) * brk
    return Projection(
        remaining_intervals=remaining,
        total_intervals=total,
        finish_at=now + timedelta(seconds=seconds),
        computed_at=now,
    )
