"""
/tasks — manage the task queue that receives credit for finished work intervals.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from ...api.schemas import RequiredIntervalsIn, TaskIn, TaskOut, TaskQueueOut

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _get_services(request: Request):
    return request.app.state.services


@router.get("", response_model=TaskQueueOut)
async def list_tasks(services=Depends(_get_services)):
    return TaskQueueOut.from_queue(services["task_queue"])


@router.post("", response_model=TaskQueueOut, status_code=201)
async def add_task(task: TaskIn, response: Response, services=Depends(_get_services)):
    """Append a task. Blank names are ignored (200, queue unchanged)."""
    created = services["task_queue"].enqueue(task.name, task.required_intervals)
    if created is None:
        response.status_code = 200
    else:
        services["engine"].refresh_projection()
    return TaskQueueOut.from_queue(services["task_queue"])


@router.delete("/{task_id}")
async def remove_task(task_id: int, services=Depends(_get_services)):
    if not services["task_queue"].remove(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    services["engine"].refresh_projection()
    return {"status": "removed"}


@router.post("/{task_id}/toggle", response_model=TaskOut)
async def toggle_task(task_id: int, services=Depends(_get_services)):
    """Manual click on a task: one more interval, or back to zero once full."""
    task = services["task_queue"].toggle_manual(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    services["engine"].refresh_projection()
    return TaskOut.from_task(task)


@router.put("/{task_id}/required", response_model=TaskOut)
async def set_required(task_id: int, req: RequiredIntervalsIn, services=Depends(_get_services)):
    queue = services["task_queue"]
    if queue.get(task_id) is None:
        raise HTTPException(status_code=404, detail="Task not found")
    task = queue.set_required(task_id, req.required_intervals)
    if task is None:
        # below one interval: ignored, report the task unchanged
        return TaskOut.from_task(queue.get(task_id))
    services["engine"].refresh_projection()
    return TaskOut.from_task(task)
