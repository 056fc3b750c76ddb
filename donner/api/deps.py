"""FastAPI dependency injection wiring."""

from __future__ import annotations

import os

from fastapi import Depends, Request

from donner.api.auth import UserClaims, verify_firebase_token
from donner.persistence.repositories.strike_repo import StrikeRepository
from donner.services.controller import LifecycleController
from donner.services.sensors import QueueSensorSource
from donner.services.storms import DEFAULT_GAP_THRESHOLD_S


# ------------------------------------------------------------------
# Current user
# ------------------------------------------------------------------


def get_current_user(
    claims: UserClaims = Depends(verify_firebase_token),
) -> str:
    """Return the authenticated observer ID."""
    return claims.uid


# ------------------------------------------------------------------
# Repositories (stateless, one per request)
# ------------------------------------------------------------------


def get_strike_repo() -> StrikeRepository:
    return StrikeRepository()


# ------------------------------------------------------------------
# Per-observer session state (lives on app.state)
# ------------------------------------------------------------------


def get_sensor_source(
    request: Request,
    user_id: str = Depends(get_current_user),
) -> QueueSensorSource:
    sources: dict[str, QueueSensorSource] = request.app.state.sensor_sources
    if user_id not in sources:
        sources[user_id] = QueueSensorSource()
    return sources[user_id]


async def get_controller(
    request: Request,
    user_id: str = Depends(get_current_user),
    repo: StrikeRepository = Depends(get_strike_repo),
    sensors: QueueSensorSource = Depends(get_sensor_source),
) -> LifecycleController:
    """The observer's lifecycle controller, started on first use.

    A controller whose initial load failed reloads on the next request.
    """
    controllers: dict[str, LifecycleController] = request.app.state.controllers
    controller = controllers.get(user_id)
    if controller is None:
        controller = LifecycleController(user_id, repo, sensors)
        controllers[user_id] = controller
        await controller.start()
    elif not controller.loaded:
        await controller.load()
    return controller


# ------------------------------------------------------------------
# Configuration
# ------------------------------------------------------------------


def get_gap_threshold() -> float:
    """Storm gap threshold in seconds (``DONNER_STORM_GAP_SECONDS``)."""
    raw = os.environ.get("DONNER_STORM_GAP_SECONDS")
    return float(raw) if raw else DEFAULT_GAP_THRESHOLD_S
