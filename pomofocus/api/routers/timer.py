"""
/timer — countdown commands, mode switching, and the live WebSocket stream.

Handlers are async so that every engine mutation runs on the event loop that
also delivers clock ticks.
"""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Request, WebSocket, WebSocketDisconnect

from ...api.schemas import ModeSwitchRequest, TimerStateOut
from ...notify.broadcast import projection_payload, state_payload
from ...timer.modes import IntervalMode

router = APIRouter(prefix="/timer", tags=["timer"])

KEEPALIVE_S = 15.0


def _get_engine(request: Request):
    return request.app.state.services["engine"]


def _respond(engine, rejection=None) -> TimerStateOut:
    return TimerStateOut.from_engine(engine, warning=rejection.value if rejection else None)


@router.get("", response_model=TimerStateOut)
async def get_timer(engine=Depends(_get_engine)):
    return _respond(engine)


@router.post("/start", response_model=TimerStateOut)
async def start_timer(engine=Depends(_get_engine)):
    return _respond(engine, engine.start())


@router.post("/resume", response_model=TimerStateOut)
async def resume_timer(engine=Depends(_get_engine)):
    return _respond(engine, engine.resume())


@router.post("/pause", response_model=TimerStateOut)
async def pause_timer(engine=Depends(_get_engine)):
    return _respond(engine, engine.pause())


@router.post("/toggle", response_model=TimerStateOut)
async def toggle_timer(engine=Depends(_get_engine)):
    """The widget's single START / PAUSE button."""
    return _respond(engine, engine.toggle())


@router.post("/stop", response_model=TimerStateOut)
async def stop_timer(engine=Depends(_get_engine)):
    engine.stop()
    return _respond(engine)


@router.post("/mode", response_model=TimerStateOut)
async def switch_mode(req: ModeSwitchRequest, engine=Depends(_get_engine)):
    try:
        target = IntervalMode.parse(req.mode)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown mode: {req.mode}")
    return _respond(engine, engine.switch_mode(target))


@router.websocket("/ws")
async def timer_websocket(websocket: WebSocket):
    """
    Pushes {"type": "state"} on every tick and transition, {"type": "projection"}
    every minute while running, and {"type": "event"} for completions and breaks.
    """
    services = websocket.app.state.services
    engine = services["engine"]
    broadcaster = services["broadcaster"]

    await websocket.accept()
    queue = broadcaster.subscribe()
    try:
        await websocket.send_json(state_payload(engine.state))
        await websocket.send_json(projection_payload(engine.latest_projection))
        while True:
            try:
                payload = await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_S)
            except asyncio.TimeoutError:
                payload = state_payload(engine.state)
            await websocket.send_json(payload)
    except WebSocketDisconnect:
        pass
    finally:
        broadcaster.unsubscribe(queue)
