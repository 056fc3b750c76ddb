"""Strike timing endpoints: flash, thunder, cancel."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from donner.api.deps import get_controller
from donner.api.serializers import state_to_dict
from donner.services.controller import LifecycleController

router = APIRouter(prefix="/lifecycle", tags=["lifecycle"])


@router.get("")
async def get_state(
    controller: LifecycleController = Depends(get_controller),
) -> dict:
    return state_to_dict(controller.state)


@router.post("/flash")
async def flash_observed(
    controller: LifecycleController = Depends(get_controller),
) -> dict:
    return state_to_dict(await controller.flash())


@router.post("/thunder")
async def thunder_observed(
    controller: LifecycleController = Depends(get_controller),
) -> dict:
    return state_to_dict(await controller.thunder())


@router.post("/cancel")
async def cancel_tracking(
    controller: LifecycleController = Depends(get_controller),
) -> dict:
    return state_to_dict(await controller.cancel_tracking())


@router.post("/errors/dismiss")
async def dismiss_error(
    controller: LifecycleController = Depends(get_controller),
) -> dict:
    return state_to_dict(await controller.dismiss_error())
