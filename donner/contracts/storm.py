"""StormGroup, MapRegion — calculated projections for map display.

Never persisted: both are recomputed from the strike collection on every
read, and a storm's age depends on the wall clock.
"""

from datetime import datetime, timezone
from typing import Self

from pydantic import Field, model_validator

from donner.contracts.common import FirestoreModel, GeoPoint
from donner.contracts.enums import StormBand
from donner.contracts.strike import Strike

# Opacity decays linearly from MAX to MIN over MAX_AGE hours, then holds.
MAX_AGE_HOURS = 24.0
MIN_OPACITY = 0.3
MAX_OPACITY = 1.0

# Band thresholds on opacity (strictly greater than)
_RECENT_OPACITY = 0.7
_MEDIUM_OPACITY = 0.5

STORM_BAND_COLORS: dict[StormBand, tuple[float, float, float]] = {
    StormBand.RECENT: (1.0, 0.85, 0.3),
    StormBand.MEDIUM: (1.0, 0.7, 0.4),
    StormBand.OLD: (0.7, 0.7, 0.7),
}


def opacity_for_age(age_hours: float) -> float:
    """Visual weight in [0.3, 1.0] for a storm ``age_hours`` old."""
    # Future timestamps (clock skew) count as brand new
    age = min(max(age_hours, 0.0), MAX_AGE_HOURS)
    normalized = age / MAX_AGE_HOURS
    return MAX_OPACITY - normalized * (MAX_OPACITY - MIN_OPACITY)


def band_for_opacity(opacity: float) -> StormBand:
    if opacity > _RECENT_OPACITY:
        return StormBand.RECENT
    if opacity > _MEDIUM_OPACITY:
        return StormBand.MEDIUM
    return StormBand.OLD


class StormGroup(FirestoreModel):
    """Strikes belonging to one temporally contiguous storm, oldest first."""

    strikes: list[Strike] = Field(..., min_length=1)

    @model_validator(mode="after")
    def sort_chronologically(self) -> Self:
        self.strikes.sort(key=lambda s: s.lightning_time)
        return self

    @property
    def start_time(self) -> datetime:
        return self.strikes[0].lightning_time

    @property
    def end_time(self) -> datetime:
        return self.strikes[-1].lightning_time

    @property
    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() // 60)

    def age_hours(self, now: datetime | None = None) -> float:
        """Hours since the storm's latest strike."""
        now = now or datetime.now(tz=timezone.utc)
        return (now - self.end_time).total_seconds() / 3600

    def opacity(self, now: datetime | None = None) -> float:
        return opacity_for_age(self.age_hours(now))

    def band(self, now: datetime | None = None) -> StormBand:
        return band_for_opacity(self.opacity(now))


class MapRegion(FirestoreModel):
    """Map viewport: a center plus latitude/longitude spans in degrees."""

    center: GeoPoint
    latitude_delta: float = Field(..., gt=0)
    longitude_delta: float = Field(..., gt=0)
