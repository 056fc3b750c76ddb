"""Heading capture endpoints: record the bearing toward a stored strike."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, Field

from donner.api.deps import get_controller
from donner.api.serializers import state_to_dict
from donner.contracts.common import GeoPoint
from donner.services.controller import LifecycleController

router = APIRouter(prefix="/heading-capture", tags=["heading-capture"])


class BeginCaptureRequest(BaseModel):
    strike_id: str = Field(..., min_length=1)


class HeadingFixRequest(BaseModel):
    bearing_deg: float = Field(..., ge=0, lt=360)
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


@router.post("")
async def begin_capture(
    body: BeginCaptureRequest,
    controller: LifecycleController = Depends(get_controller),
) -> dict:
    if controller.state.find_strike(body.strike_id) is None:
        raise HTTPException(status_code=404, detail="Strike not found")
    return state_to_dict(await controller.begin_heading_capture(body.strike_id))


@router.post("/record")
async def record_heading(
    body: HeadingFixRequest | None = Body(default=None),
    controller: LifecycleController = Depends(get_controller),
) -> dict:
    """Record an explicit fix, or the latest sensor samples when no body is sent."""
    if body is None:
        state = await controller.record_heading()
    else:
        state = await controller.capture_heading(
            body.bearing_deg,
            GeoPoint(latitude=body.latitude, longitude=body.longitude),
        )
    return state_to_dict(state)


@router.post("/cancel")
async def cancel_capture(
    controller: LifecycleController = Depends(get_controller),
) -> dict:
    return state_to_dict(await controller.cancel_heading_capture())
