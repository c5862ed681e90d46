"""
/settings — read and update interval durations and timer policy flags.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from ...api.schemas import DurationAdjustIn, SettingsPatch
from ...settings import DEFAULTS, SettingsSnapshot
from ...timer.modes import IntervalMode

router = APIRouter(prefix="/settings", tags=["settings"])


def _get_services(request: Request):
    return request.app.state.services


def _current(services) -> SettingsSnapshot:
    engine = services["engine"]
    return SettingsSnapshot.capture(engine.catalog, engine.policy)


def _persist(services) -> SettingsSnapshot:
    snapshot = _current(services)
    services["settings_store"].save(snapshot)
    return snapshot


@router.get("")
async def read_settings(services=Depends(_get_services)):
    """Return current settings with their defaults for reference."""
    return {"settings": _current(services).to_dict(), "defaults": DEFAULTS}


@router.put("")
async def write_settings(patch: SettingsPatch, services=Depends(_get_services)):
    """Apply a partial update; durations are clamped. Persists to data/settings.json."""
    engine = services["engine"]
    data = {k: v for k, v in patch.model_dump().items() if v is not None}
    updated = _current(services).merged(data)

    for mode, minutes in updated.durations().items():
        if minutes != engine.catalog.get_minutes(mode):
            engine.catalog.set_duration(mode, minutes)
    engine.policy = updated.policy()

    return {"settings": _persist(services).to_dict()}


@router.post("/durations/{mode}/adjust")
async def adjust_duration(mode: str, req: DurationAdjustIn, services=Depends(_get_services)):
    """The widget's ± buttons: move a duration by 5-minute steps."""
    try:
        target = IntervalMode.parse(mode)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown mode: {mode}")
    minutes = services["engine"].catalog.adjust(target, req.steps)
    return {"mode": target.value, "minutes": minutes, "settings": _persist(services).to_dict()}
