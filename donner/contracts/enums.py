"""Enumerations shared across all Donner contracts."""

from enum import Enum


class LifecycleMode(str, Enum):
    """Whether a strike is currently being timed."""
    IDLE = "idle"
    TRACKING = "tracking"


class SensorKind(str, Enum):
    LOCATION = "location"
    HEADING = "heading"


class AuthorizationStatus(str, Enum):
    """Location permission as reported by the device."""
    NOT_DETERMINED = "not_determined"
    RESTRICTED = "restricted"
    DENIED = "denied"
    AUTHORIZED_ALWAYS = "authorized_always"
    AUTHORIZED_WHEN_IN_USE = "authorized_when_in_use"


class StormBand(str, Enum):
    """Age band of a storm, derived from its opacity."""
    RECENT = "recent"
    MEDIUM = "medium"
    OLD = "old"
