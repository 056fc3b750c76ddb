"""Stored strike endpoints: list, get, delete, clear location data."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from donner.api.deps import get_controller, get_current_user, get_strike_repo
from donner.api.serializers import state_to_dict, strike_to_dict
from donner.persistence.errors import StrikeReadError
from donner.persistence.repositories.strike_repo import StrikeRepository
from donner.services.controller import LifecycleController

router = APIRouter(prefix="/strikes", tags=["strikes"])


@router.get("")
async def list_strikes(
    user_id: str = Depends(get_current_user),
    repo: StrikeRepository = Depends(get_strike_repo),
) -> list[dict]:
    try:
        strikes = await repo.fetch_all(user_id)
    except StrikeReadError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return [strike_to_dict(s) for s in strikes]


@router.get("/{strike_id}")
async def get_strike(
    strike_id: str,
    user_id: str = Depends(get_current_user),
    repo: StrikeRepository = Depends(get_strike_repo),
) -> dict:
    try:
        strike = await repo.get(user_id, strike_id)
    except StrikeReadError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    if strike is None:
        raise HTTPException(status_code=404, detail="Strike not found")
    return strike_to_dict(strike)


@router.delete("/{strike_id}", status_code=202)
async def delete_strike(
    strike_id: str,
    controller: LifecycleController = Depends(get_controller),
) -> dict:
    if controller.state.find_strike(strike_id) is None:
        raise HTTPException(status_code=404, detail="Strike not found")
    return state_to_dict(await controller.delete_strike(strike_id))


@router.delete("/{strike_id}/location", status_code=202)
async def clear_location_data(
    strike_id: str,
    controller: LifecycleController = Depends(get_controller),
) -> dict:
    if controller.state.find_strike(strike_id) is None:
        raise HTTPException(status_code=404, detail="Strike not found")
    return state_to_dict(await controller.clear_location_data(strike_id))
