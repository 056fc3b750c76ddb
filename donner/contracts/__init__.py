"""Donner data contracts — Pydantic v2 models for lightning strike observation.

Data authority
--------------

**Firestore** (source of truth for observer-owned data):
- ``Strike`` — ``/users/{uid}/strikes/{id}``, including its optional ``HeadingFix``

Calculated (never persisted)
----------------------------
- ``Strike`` derived quantities — duration, distance, estimated location
- ``StormGroup`` — temporally contiguous strikes with age-based opacity
- ``MapRegion`` — map viewport around a storm

Transient (device input, never persisted)
-----------------------------------------
- ``LocationSample`` / ``HeadingSample`` — sensor readings
"""

from donner.contracts.enums import (
    AuthorizationStatus,
    LifecycleMode,
    SensorKind,
    StormBand,
)
from donner.contracts.common import FirestoreModel, GeoPoint
from donner.contracts.result import ServiceError
from donner.contracts.strike import SPEED_OF_SOUND_MPS, HeadingFix, Strike
from donner.contracts.storm import (
    STORM_BAND_COLORS,
    MapRegion,
    StormGroup,
    band_for_opacity,
    opacity_for_age,
)
from donner.contracts.sensors import HeadingSample, LocationSample

__all__ = [
    # Enums
    "AuthorizationStatus",
    "LifecycleMode",
    "SensorKind",
    "StormBand",
    # Common
    "FirestoreModel",
    "GeoPoint",
    # Result
    "ServiceError",
    # Domain models
    "SPEED_OF_SOUND_MPS",
    "HeadingFix",
    "Strike",
    "STORM_BAND_COLORS",
    "MapRegion",
    "StormGroup",
    "band_for_opacity",
    "opacity_for_age",
    "HeadingSample",
    "LocationSample",
]
