"""Sensor feed endpoints: the device pushes position, heading and permission."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from donner.api.deps import get_controller, get_sensor_source
from donner.api.serializers import state_to_dict
from donner.contracts.enums import AuthorizationStatus
from donner.contracts.sensors import HeadingSample, LocationSample
from donner.services.controller import LifecycleController
from donner.services.sensors import QueueSensorSource

router = APIRouter(prefix="/sensors", tags=["sensors"])


class AuthorizationRequest(BaseModel):
    status: AuthorizationStatus


@router.post("/location", status_code=202)
async def push_location(
    sample: LocationSample,
    controller: LifecycleController = Depends(get_controller),
    sensors: QueueSensorSource = Depends(get_sensor_source),
) -> dict:
    return {"accepted": sensors.push(sample)}


@router.post("/heading", status_code=202)
async def push_heading(
    sample: HeadingSample,
    controller: LifecycleController = Depends(get_controller),
    sensors: QueueSensorSource = Depends(get_sensor_source),
) -> dict:
    return {"accepted": sensors.push(sample)}


@router.post("/authorization")
async def authorization_changed(
    body: AuthorizationRequest,
    controller: LifecycleController = Depends(get_controller),
) -> dict:
    return state_to_dict(await controller.authorization_changed(body.status))
