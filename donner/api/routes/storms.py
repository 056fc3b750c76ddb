"""Storm projection endpoints for map clustering and coloring."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from donner.api.deps import get_current_user, get_gap_threshold, get_strike_repo
from donner.api.serializers import storm_to_dict, storm_with_region_to_dict
from donner.persistence.errors import StrikeReadError
from donner.persistence.repositories.strike_repo import StrikeRepository
from donner.services.storms import group_into_storms, storm_for_strike

router = APIRouter(prefix="/storms", tags=["storms"])


@router.get("")
async def list_storms(
    gap_seconds: float | None = Query(default=None, gt=0),
    user_id: str = Depends(get_current_user),
    repo: StrikeRepository = Depends(get_strike_repo),
    default_gap: float = Depends(get_gap_threshold),
) -> list[dict]:
    """Storms, most recent first."""
    try:
        strikes = await repo.fetch_all(user_id)
    except StrikeReadError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    storms = group_into_storms(strikes, gap_seconds or default_gap)
    return [storm_to_dict(s) for s in storms]


@router.get("/by-strike/{strike_id}")
async def get_storm_for_strike(
    strike_id: str,
    gap_seconds: float | None = Query(default=None, gt=0),
    user_id: str = Depends(get_current_user),
    repo: StrikeRepository = Depends(get_strike_repo),
    default_gap: float = Depends(get_gap_threshold),
) -> dict:
    """The storm containing one strike, with a map region bounding it."""
    try:
        strikes = await repo.fetch_all(user_id)
    except StrikeReadError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    storm = storm_for_strike(strikes, strike_id, gap_seconds or default_gap)
    if storm is None:
        raise HTTPException(status_code=404, detail="Strike not found")
    return storm_with_region_to_dict(storm)
