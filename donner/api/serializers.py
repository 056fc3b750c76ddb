"""JSON views of strikes, storms and lifecycle snapshots for API responses.

Stored documents carry only observed facts; the views add the derived
quantities the client displays.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from donner.contracts.storm import STORM_BAND_COLORS, StormGroup
from donner.contracts.strike import Strike
from donner.services.lifecycle import LifecycleState
from donner.services.storms import map_region, storm_path


def strike_to_dict(strike: Strike) -> dict[str, Any]:
    data = strike.to_firestore()
    estimated = strike.estimated_location
    data.update(
        duration_s=strike.duration_s,
        distance_m=strike.distance_m,
        distance_km=strike.distance_km,
        distance_miles=strike.distance_miles,
        estimated_location=estimated.model_dump() if estimated else None,
    )
    return data


def storm_to_dict(storm: StormGroup, now: datetime | None = None) -> dict[str, Any]:
    band = storm.band(now)
    return {
        "start_time": storm.start_time.isoformat(),
        "end_time": storm.end_time.isoformat(),
        "duration_minutes": storm.duration_minutes,
        "age_hours": storm.age_hours(now),
        "opacity": storm.opacity(now),
        "band": band.value,
        "color": list(STORM_BAND_COLORS[band]),
        "path": [p.model_dump() for p in storm_path(storm.strikes)],
        "strikes": [strike_to_dict(s) for s in storm.strikes],
    }


def storm_with_region_to_dict(storm: StormGroup, now: datetime | None = None) -> dict[str, Any]:
    data = storm_to_dict(storm, now)
    data["region"] = map_region(storm.strikes).to_firestore()
    return data


def state_to_dict(state: LifecycleState) -> dict[str, Any]:
    return {
        "mode": state.mode.value,
        "current": strike_to_dict(state.current) if state.current else None,
        "heading_target": state.heading_target,
        "capture_heading_deg": (
            state.capture_heading.resolved_heading_deg if state.capture_heading else None
        ),
        "capture_calibrated": (
            state.capture_heading.is_calibrated if state.capture_heading else False
        ),
        "capture_location": (
            state.capture_location.model_dump() if state.capture_location else None
        ),
        "authorization": state.authorization.value,
        "strike_count": len(state.strikes),
        "pending_writes": len(state.pending),
        "last_error": state.last_error.model_dump(mode="json") if state.last_error else None,
    }
