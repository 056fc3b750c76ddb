"""Strike — one observed lightning flash and, once heard, its thunder.

Stored at: ``/users/{user_id}/strikes/{strike_id}``

Only the observed facts are persisted (times, locations, heading fix).
Duration, distance and the estimated strike location are derived on read
and never written to Firestore.
"""

from datetime import datetime
from typing import Self

from pydantic import ConfigDict, Field, model_validator

from donner.contracts.common import FirestoreModel, GeoPoint
from donner.services import geodesy

SPEED_OF_SOUND_MPS = 343.0
METERS_TO_MILES = 0.000621371


class HeadingFix(FirestoreModel):
    """Bearing toward the flash plus the observer position it was taken from.

    The two values only make sense together, so they live in one optional
    field on ``Strike`` and are set or cleared as a pair.
    """

    bearing_deg: float = Field(..., ge=0, lt=360, description="Clockwise from true north")
    location: GeoPoint

    model_config = ConfigDict(frozen=True)


class Strike(FirestoreModel):
    """A lightning strike observation.

    ``thunder_time`` is unset while the strike is being tracked and set
    exactly once when the thunder is heard.
    """

    id: str = Field(..., min_length=1)
    lightning_time: datetime
    lightning_location: GeoPoint | None = None
    thunder_time: datetime | None = None
    heading_fix: HeadingFix | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_thunder_after_lightning(self) -> Self:
        if self.thunder_time is not None and self.thunder_time < self.lightning_time:
            raise ValueError(
                f"thunder_time ({self.thunder_time.isoformat()}) is before "
                f"lightning_time ({self.lightning_time.isoformat()})"
            )
        return self

    # ------------------------------------------------------------------
    # Heading fix accessors
    # ------------------------------------------------------------------

    @property
    def direction(self) -> float | None:
        return self.heading_fix.bearing_deg if self.heading_fix else None

    @property
    def user_location(self) -> GeoPoint | None:
        return self.heading_fix.location if self.heading_fix else None

    # ------------------------------------------------------------------
    # Derived quantities (None when preconditions are unmet)
    # ------------------------------------------------------------------

    @property
    def is_complete(self) -> bool:
        return self.thunder_time is not None

    @property
    def duration_s(self) -> float | None:
        """Seconds between flash and thunder."""
        if self.thunder_time is None:
            return None
        return (self.thunder_time - self.lightning_time).total_seconds()

    @property
    def distance_m(self) -> float | None:
        """Distance to the strike from the flash-to-bang delay."""
        duration = self.duration_s
        if duration is None:
            return None
        return duration * SPEED_OF_SOUND_MPS

    @property
    def distance_km(self) -> float | None:
        distance = self.distance_m
        return None if distance is None else distance / 1000.0

    @property
    def distance_miles(self) -> float | None:
        distance = self.distance_m
        return None if distance is None else distance * METERS_TO_MILES

    @property
    def estimated_location(self) -> GeoPoint | None:
        """Projected strike position from the observer, bearing and distance."""
        distance = self.distance_m
        if distance is None or self.heading_fix is None:
            return None
        return geodesy.destination_point(
            self.heading_fix.location, self.heading_fix.bearing_deg, distance
        )

    @property
    def has_location_data(self) -> bool:
        return self.estimated_location is not None
