"""
/projection — estimated finish time for the remaining task load.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from ...api.schemas import ProjectionOut

router = APIRouter(prefix="/projection", tags=["projection"])


@router.get("", response_model=ProjectionOut)
async def get_projection(request: Request):
    """Recomputed from scratch on every call."""
    engine = request.app.state.services["engine"]
    return ProjectionOut.from_projection(engine.refresh_projection())
