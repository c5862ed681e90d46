"""
FastAPI application — local API behind the Pomofocus browser widget.
Runs on http://127.0.0.1:8765 by default.

Services (engine, task queue, settings store, broadcaster) live on app.state
so that each call to create_app() produces a fully independent instance with
no shared module-level globals. This makes test isolation straightforward.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..clock import AsyncioClock, Clock
from ..config import config
from ..notify.base import LogNotifier, NotifierGroup
from ..notify.broadcast import BroadcastNotifier
from ..notify.desktop import DesktopNotifier
from ..settings import SettingsStore
from ..timer.engine import TimerEngine
from ..timer.modes import ModeCatalog
from ..timer.tasks import TaskQueue

logger = logging.getLogger(__name__)


def build_services(clock: Clock, settings_path: Path) -> dict:
    store = SettingsStore(settings_path)
    snapshot = store.load()

    broadcaster = BroadcastNotifier()
    notifier = NotifierGroup([LogNotifier(), broadcaster])
    if config.desktop_notifications:
        notifier.add(DesktopNotifier())

    catalog = ModeCatalog(snapshot.durations())
    task_queue = TaskQueue(now=clock.now)
    engine = TimerEngine(
        catalog,
        task_queue,
        clock,
        notifier=notifier,
        policy=snapshot.policy(),
        projection_refresh_s=config.projection_refresh_s,
    )
    engine.register_listener(broadcaster.on_state)
    engine.register_projection_listener(broadcaster.on_projection)

    return {
        "engine": engine,
        "task_queue": task_queue,
        "settings_store": store,
        "broadcaster": broadcaster,
        "clock": clock,
    }


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(clock: Optional[Clock] = None, settings_path: Optional[Path] = None) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.services = build_services(
            clock or AsyncioClock(config.tick_interval_s),
            settings_path or config.settings_path,
        )
        logger.info("timer service ready")

        yield

        # Tear down any live countdown so no callback outlives the app.
        app.state.services["engine"].stop()

    app = FastAPI(
        title="Pomofocus",
        description="Local focus-timer engine for the Pomofocus widget",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:3000", "null"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from .routers import projection, settings, tasks, timer

    app.include_router(timer.router)
    app.include_router(tasks.router)
    app.include_router(projection.router)
    app.include_router(settings.router)

    @app.get("/health")
    async def health(request: Request):
        services = getattr(request.app.state, "services", None)
        now = services["clock"].now().isoformat() if services else None
        return {"status": "ok", "version": "0.1.0", "now": now}

    return app


app = create_app()
