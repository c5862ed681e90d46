"""
Pydantic schemas for the FastAPI local API.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..timer.engine import TimerEngine
from ..timer.projector import Projection
from ..timer.tasks import Task, TaskQueue

# ── Timer ──────────────────────────────────────────────────────────────────

class ModeSwitchRequest(BaseModel):
    mode: str = Field(..., description="work | short_break | long_break (or pomodoro | short-break | long-break)")


class TimerStateOut(BaseModel):
    mode: str
    mode_label: str
    phase: str
    remaining_seconds: int = Field(..., ge=0)
    total_seconds: int = Field(..., ge=0)
    display: str
    warning: Optional[str] = None

    @classmethod
    def from_engine(cls, engine: TimerEngine, warning: Optional[str] = None) -> "TimerStateOut":
        s = engine.state
        return cls(
            mode=s.mode.value,
            mode_label=s.mode.label,
            phase=s.phase.value,
            remaining_seconds=s.remaining_seconds,
            total_seconds=s.total_seconds,
            display=s.display,
            warning=warning,
        )


# ── Tasks ──────────────────────────────────────────────────────────────────

class TaskIn(BaseModel):
    name: str = ""
    required_intervals: int = 1


class RequiredIntervalsIn(BaseModel):
    required_intervals: int


class TaskOut(BaseModel):
    id: int
    name: str
    required_intervals: int
    completed_intervals: int
    complete: bool
    created_at: datetime

    @classmethod
    def from_task(cls, task: Task) -> "TaskOut":
        return cls(
            id=task.id,
            name=task.name,
            required_intervals=task.required_intervals,
            completed_intervals=task.completed_intervals,
            complete=task.is_complete,
            created_at=task.created_at,
        )


class TaskQueueOut(BaseModel):
    tasks: List[TaskOut]
    current_index: int
    current_task: Optional[TaskOut]
    total_intervals: int

    @classmethod
    def from_queue(cls, queue: TaskQueue) -> "TaskQueueOut":
        current = queue.current()
        return cls(
            tasks=[TaskOut.from_task(t) for t in queue.tasks()],
            current_index=queue.current_index,
            current_task=TaskOut.from_task(current) if current else None,
            total_intervals=queue.total_intervals(),
        )


# ── Projection ─────────────────────────────────────────────────────────────

class ProjectionOut(BaseModel):
    remaining_intervals: int
    total_intervals: int
    finish_at: Optional[datetime]
    all_complete: bool
    computed_at: datetime

    @classmethod
    def from_projection(cls, p: Projection) -> "ProjectionOut":
        return cls(
            remaining_intervals=p.remaining_intervals,
            total_intervals=p.total_intervals,
            finish_at=p.finish_at,
            all_complete=p.all_complete,
            computed_at=p.computed_at,
        )


# ── Settings ───────────────────────────────────────────────────────────────

class SettingsPatch(BaseModel):
    # Durations are clamped into [1, 120] by the mode catalog, not rejected.
    pomodoro_minutes:    Optional[int]  = None
    short_break_minutes: Optional[int]  = None
    long_break_minutes:  Optional[int]  = None
    auto_switch:         Optional[bool] = None
    sound_enabled:       Optional[bool] = None
    animations_enabled:  Optional[bool] = None


class DurationAdjustIn(BaseModel):
    steps: int = Field(..., description="Number of 5-minute steps; negative shortens")
