"""Base classes and shared types for Donner contracts.

Unit conventions (all contracts and API responses):
- **Distances**: meters — suffix ``_m`` (``_km`` / ``_miles`` for display helpers)
- **Durations**: seconds — suffix ``_s``
- **Bearings/angles**: degrees clockwise from true north — suffix ``_deg``
- **Datetimes**: always UTC, ISO 8601 in serialized form
- **Coordinates**: WGS84 decimal degrees, no datum conversion
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class FirestoreModel(BaseModel):
    """Base model with Firestore-friendly serialization.

    - Enums serialize as string values (Firestore stores strings).
    - ``to_firestore()`` produces a JSON-safe dict (datetimes as ISO 8601).
    - ``from_firestore()`` hydrates from a Firestore document dict.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_firestore(self) -> dict[str, Any]:
        """Dump to Firestore-compatible dict."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_firestore(cls, data: dict[str, Any]) -> "FirestoreModel":
        """Create model instance from Firestore document dict."""
        return cls.model_validate(data)


class GeoPoint(BaseModel):
    """WGS84 geographic coordinate."""

    latitude: float
    longitude: float

    model_config = ConfigDict(frozen=True)

    @property
    def in_range(self) -> bool:
        """True when the coordinate lies within the WGS84 lat/lon bounds."""
        return -90.0 <= self.latitude <= 90.0 and -180.0 <= self.longitude <= 180.0
