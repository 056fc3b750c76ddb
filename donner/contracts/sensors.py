"""Sensor samples delivered by the device: position fixes and compass headings."""

from datetime import datetime, timezone
from typing import Self

from pydantic import ConfigDict, Field, model_validator

from donner.contracts.common import FirestoreModel, GeoPoint
from donner.contracts.enums import SensorKind


class LocationSample(FirestoreModel):
    """A position fix."""

    coordinate: GeoPoint
    timestamp: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_coordinate(self) -> Self:
        if not self.coordinate.in_range:
            raise ValueError(
                f"Coordinate out of range: ({self.coordinate.latitude}, "
                f"{self.coordinate.longitude})"
            )
        return self

    @property
    def kind(self) -> SensorKind:
        return SensorKind.LOCATION


class HeadingSample(FirestoreModel):
    """A compass reading.

    Negative values follow the platform convention for "unavailable":
    a negative true heading means only the magnetic heading is valid,
    a negative accuracy means the compass is not calibrated.
    """

    true_heading_deg: float = Field(default=-1.0, lt=360)
    magnetic_heading_deg: float = Field(..., ge=0, le=360)
    accuracy_deg: float = -1.0
    timestamp: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))

    model_config = ConfigDict(frozen=True)

    @property
    def kind(self) -> SensorKind:
        return SensorKind.HEADING

    @property
    def resolved_heading_deg(self) -> float:
        """True heading when available, magnetic otherwise, in [0, 360)."""
        heading = (
            self.true_heading_deg
            if self.true_heading_deg >= 0
            else self.magnetic_heading_deg
        )
        return heading % 360.0

    @property
    def is_calibrated(self) -> bool:
        return self.accuracy_deg >= 0
