"""Strike lifecycle state machine.

``transition(state, event)`` is pure: it returns the next immutable
``LifecycleState`` plus the side effects (commands) the caller must carry
out. Nothing here performs I/O.

States
------
- **Idle** — ``state.current is None``.
- **Tracking** — ``state.current`` holds the strike being timed.
- **Heading capture** — orthogonal sub-state, ``state.heading_target`` holds
  the id of the stored strike whose bearing is being recorded. It can be
  entered whether or not a strike is being tracked.

Guards
------
An event arriving in a state where it has no effect is a no-op, never an
error. Guards read ``state.strikes``, the collection as last requested:
a completed, edited or deleted strike shows there as soon as the write is
issued. ``state.confirmed`` holds what the store has acknowledged.

Writes
------
Every write command carries a revision number and the strike id is
recorded in ``state.pending`` until the matching confirmation arrives.
Writes must be applied in the order issued. When the latest write for a
strike fails, that strike is rolled back to its confirmed value.

Sensors
-------
Tracking needs the location sensor; heading capture needs location and
heading. Start/stop commands are derived from the difference between the
sensors required before and after each transition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Iterable, Mapping, Union

from donner.contracts.common import GeoPoint
from donner.contracts.enums import AuthorizationStatus, LifecycleMode, SensorKind
from donner.contracts.result import ServiceError
from donner.contracts.sensors import HeadingSample, LocationSample
from donner.contracts.strike import HeadingFix, Strike
from donner.services.geodesy import normalize_bearing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LifecycleState:
    current: Strike | None = None
    heading_target: str | None = None
    strikes: tuple[Strike, ...] = ()
    confirmed: tuple[Strike, ...] = ()
    pending: Mapping[str, int] = field(default_factory=dict)
    revision: int = 0
    authorization: AuthorizationStatus = AuthorizationStatus.NOT_DETERMINED
    capture_heading: HeadingSample | None = None
    capture_location: GeoPoint | None = None
    last_error: ServiceError | None = None

    @property
    def mode(self) -> LifecycleMode:
        return LifecycleMode.IDLE if self.current is None else LifecycleMode.TRACKING

    @property
    def is_tracking(self) -> bool:
        return self.current is not None

    @property
    def is_capturing_heading(self) -> bool:
        return self.heading_target is not None

    @property
    def required_sensors(self) -> frozenset[SensorKind]:
        kinds: set[SensorKind] = set()
        if self.is_tracking:
            kinds.add(SensorKind.LOCATION)
        if self.is_capturing_heading:
            kinds.update((SensorKind.LOCATION, SensorKind.HEADING))
        return frozenset(kinds)

    def find_strike(self, strike_id: str) -> Strike | None:
        return _find(self.strikes, strike_id)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FlashObserved:
    at: datetime
    strike_id: str


@dataclass(frozen=True)
class ThunderObserved:
    at: datetime


@dataclass(frozen=True)
class TrackingCancelled:
    pass


@dataclass(frozen=True)
class LocationSampled:
    sample: LocationSample


@dataclass(frozen=True)
class HeadingSampled:
    sample: HeadingSample


@dataclass(frozen=True)
class BeginHeadingCapture:
    strike_id: str


@dataclass(frozen=True)
class HeadingCaptured:
    bearing_deg: float
    location: GeoPoint


@dataclass(frozen=True)
class RecordHeadingRequested:
    """Record using the latest heading and location samples."""


@dataclass(frozen=True)
class HeadingCaptureCancelled:
    pass


@dataclass(frozen=True)
class ClearLocationData:
    strike_id: str


@dataclass(frozen=True)
class DeleteStrike:
    strike_id: str


@dataclass(frozen=True)
class AuthorizationChanged:
    status: AuthorizationStatus


@dataclass(frozen=True)
class StrikesLoaded:
    strikes: tuple[Strike, ...]


@dataclass(frozen=True)
class StrikePersisted:
    strike: Strike
    revision: int


@dataclass(frozen=True)
class StrikeRemoved:
    strike_id: str
    revision: int


@dataclass(frozen=True)
class PersistenceFailed:
    """A write or load failed. Write failures name the strike and revision."""

    error: ServiceError
    strike_id: str | None = None
    revision: int | None = None


@dataclass(frozen=True)
class ErrorDismissed:
    pass


Event = Union[
    FlashObserved,
    ThunderObserved,
    TrackingCancelled,
    LocationSampled,
    HeadingSampled,
    BeginHeadingCapture,
    HeadingCaptured,
    RecordHeadingRequested,
    HeadingCaptureCancelled,
    ClearLocationData,
    DeleteStrike,
    AuthorizationChanged,
    StrikesLoaded,
    StrikePersisted,
    StrikeRemoved,
    PersistenceFailed,
    ErrorDismissed,
]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SaveStrike:
    strike: Strike
    revision: int


@dataclass(frozen=True)
class UpdateStrike:
    strike: Strike
    revision: int


@dataclass(frozen=True)
class RemoveStrike:
    strike_id: str
    revision: int


@dataclass(frozen=True)
class StartSensor:
    kind: SensorKind


@dataclass(frozen=True)
class StopSensor:
    kind: SensorKind


Command = Union[SaveStrike, UpdateStrike, RemoveStrike, StartSensor, StopSensor]
WriteCommand = Union[SaveStrike, UpdateStrike, RemoveStrike]


@dataclass(frozen=True)
class Transition:
    state: LifecycleState
    commands: tuple[Command, ...] = ()


_Result = tuple[LifecycleState, tuple[Command, ...]]


def transition(state: LifecycleState, event: Event) -> Transition:
    """Apply ``event`` to ``state``."""
    handler = _HANDLERS[type(event)]
    new_state, commands = handler(state, event)
    return Transition(new_state, _sensor_commands(state, new_state) + commands)


def _sensor_commands(old: LifecycleState, new: LifecycleState) -> tuple[Command, ...]:
    before, after = old.required_sensors, new.required_sensors
    stops = [StopSensor(k) for k in sorted(before - after, key=lambda k: k.value)]
    starts = [StartSensor(k) for k in sorted(after - before, key=lambda k: k.value)]
    return tuple(stops + starts)


def _exit_capture(state: LifecycleState) -> LifecycleState:
    return replace(
        state, heading_target=None, capture_heading=None, capture_location=None
    )


# ---------------------------------------------------------------------------
# Collection helpers
# ---------------------------------------------------------------------------


def _find(strikes: Iterable[Strike], strike_id: str) -> Strike | None:
    for strike in strikes:
        if strike.id == strike_id:
            return strike
    return None


def _chronological(strikes: Iterable[Strike]) -> tuple[Strike, ...]:
    return tuple(sorted(strikes, key=lambda s: s.lightning_time))


def _upsert(strikes: tuple[Strike, ...], strike: Strike) -> tuple[Strike, ...]:
    return _chronological([s for s in strikes if s.id != strike.id] + [strike])


def _without(strikes: tuple[Strike, ...], strike_id: str) -> tuple[Strike, ...]:
    return tuple(s for s in strikes if s.id != strike_id)


def _issue(state: LifecycleState, strike_id: str) -> tuple[LifecycleState, int]:
    """Allocate the next write revision and mark ``strike_id`` pending."""
    revision = state.revision + 1
    pending = {**state.pending, strike_id: revision}
    return replace(state, revision=revision, pending=pending), revision


def _settle(
    state: LifecycleState, strike_id: str, revision: int | None
) -> tuple[LifecycleState, bool]:
    """Clear the pending mark if ``revision`` is the latest write for the strike."""
    if state.pending.get(strike_id) != revision:
        return state, False
    pending = {k: v for k, v in state.pending.items() if k != strike_id}
    return replace(state, pending=pending), True


# ---------------------------------------------------------------------------
# Tracking
# ---------------------------------------------------------------------------


def _on_flash(state: LifecycleState, event: FlashObserved) -> _Result:
    if state.current is not None:
        return state, ()
    strike = Strike(id=event.strike_id, lightning_time=event.at)
    logger.info("Tracking strike %s", strike.id)
    return replace(state, current=strike), ()


def _on_thunder(state: LifecycleState, event: ThunderObserved) -> _Result:
    if state.current is None:
        return state, ()
    # A clock that stepped backwards yields a zero delay, not a negative one
    thunder_time = max(event.at, state.current.lightning_time)
    completed = state.current.model_copy(update={"thunder_time": thunder_time})
    logger.info(
        "Strike %s completed: %.1f s, %.0f m",
        completed.id,
        completed.duration_s,
        completed.distance_m,
    )
    state, revision = _issue(state, completed.id)
    state = replace(state, current=None, strikes=_upsert(state.strikes, completed))
    return state, (SaveStrike(completed, revision),)


def _on_tracking_cancelled(state: LifecycleState, event: TrackingCancelled) -> _Result:
    if state.current is None:
        return state, ()
    logger.info("Discarded strike %s", state.current.id)
    return replace(state, current=None), ()


def _on_location(state: LifecycleState, event: LocationSampled) -> _Result:
    if not state.is_tracking and not state.is_capturing_heading:
        logger.debug("Dropped location sample while idle")
        return state, ()
    coordinate = event.sample.coordinate
    if state.current is not None:
        state = replace(
            state,
            current=state.current.model_copy(update={"lightning_location": coordinate}),
        )
    if state.is_capturing_heading:
        state = replace(state, capture_location=coordinate)
    return state, ()


def _on_heading(state: LifecycleState, event: HeadingSampled) -> _Result:
    if not state.is_capturing_heading:
        logger.debug("Dropped heading sample outside heading capture")
        return state, ()
    return replace(state, capture_heading=event.sample), ()


# ---------------------------------------------------------------------------
# Heading capture
# ---------------------------------------------------------------------------


def _on_begin_capture(state: LifecycleState, event: BeginHeadingCapture) -> _Result:
    strike = state.find_strike(event.strike_id)
    if strike is None or strike.has_location_data:
        return state, ()
    return replace(state, heading_target=strike.id), ()


def _on_heading_captured(state: LifecycleState, event: HeadingCaptured) -> _Result:
    if state.heading_target is None:
        return state, ()
    strike = state.find_strike(state.heading_target)
    state = _exit_capture(state)
    if strike is None:
        return state, ()
    fix = HeadingFix(bearing_deg=normalize_bearing(event.bearing_deg), location=event.location)
    updated = strike.model_copy(update={"heading_fix": fix})
    logger.info("Heading %.1f° recorded for strike %s", fix.bearing_deg, strike.id)
    return _request_update(state, updated)


def _on_record_heading(state: LifecycleState, event: RecordHeadingRequested) -> _Result:
    if state.capture_heading is None or state.capture_location is None:
        return state, ()
    return _on_heading_captured(
        state,
        HeadingCaptured(
            bearing_deg=state.capture_heading.resolved_heading_deg,
            location=state.capture_location,
        ),
    )


def _on_capture_cancelled(state: LifecycleState, event: HeadingCaptureCancelled) -> _Result:
    if state.heading_target is None:
        return state, ()
    return _exit_capture(state), ()


# ---------------------------------------------------------------------------
# Stored strike edits
# ---------------------------------------------------------------------------


def _request_update(state: LifecycleState, strike: Strike) -> _Result:
    state, revision = _issue(state, strike.id)
    state = replace(state, strikes=_upsert(state.strikes, strike))
    return state, (UpdateStrike(strike, revision),)


def _on_clear_location(state: LifecycleState, event: ClearLocationData) -> _Result:
    strike = state.find_strike(event.strike_id)
    if strike is None or strike.heading_fix is None:
        return state, ()
    return _request_update(state, strike.model_copy(update={"heading_fix": None}))


def _on_delete(state: LifecycleState, event: DeleteStrike) -> _Result:
    if state.find_strike(event.strike_id) is None:
        return state, ()
    if state.heading_target == event.strike_id:
        state = _exit_capture(state)
    state, revision = _issue(state, event.strike_id)
    state = replace(state, strikes=_without(state.strikes, event.strike_id))
    return state, (RemoveStrike(event.strike_id, revision),)


def _on_authorization(state: LifecycleState, event: AuthorizationChanged) -> _Result:
    return replace(state, authorization=event.status), ()


# ---------------------------------------------------------------------------
# Persistence feedback
# ---------------------------------------------------------------------------


def _on_loaded(state: LifecycleState, event: StrikesLoaded) -> _Result:
    confirmed = _chronological(event.strikes)
    # Writes still in flight win over what the store returned
    strikes = tuple(s for s in confirmed if s.id not in state.pending)
    strikes += tuple(s for s in state.strikes if s.id in state.pending)
    last_error = state.last_error
    if last_error is not None and last_error.code == "load_failed":
        last_error = None
    return replace(
        state,
        confirmed=confirmed,
        strikes=_chronological(strikes),
        last_error=last_error,
    ), ()


def _on_persisted(state: LifecycleState, event: StrikePersisted) -> _Result:
    state, _ = _settle(state, event.strike.id, event.revision)
    confirmed = _upsert(state.confirmed, event.strike)
    return replace(state, confirmed=confirmed, last_error=None), ()


def _on_removed(state: LifecycleState, event: StrikeRemoved) -> _Result:
    state, _ = _settle(state, event.strike_id, event.revision)
    return replace(state, confirmed=_without(state.confirmed, event.strike_id)), ()


def _on_failed(state: LifecycleState, event: PersistenceFailed) -> _Result:
    state = replace(state, last_error=event.error)
    if event.strike_id is None:
        return state, ()
    state, latest = _settle(state, event.strike_id, event.revision)
    if not latest:
        # A later write for the same strike is still queued
        return state, ()

    previous = _find(state.confirmed, event.strike_id)
    if previous is None:
        strikes = _without(state.strikes, event.strike_id)
    else:
        strikes = _upsert(state.strikes, previous)
    logger.info("Rolled back strike %s to its stored value", event.strike_id)
    state = replace(state, strikes=strikes)
    if state.heading_target == event.strike_id and previous is None:
        state = _exit_capture(state)
    return state, ()


def _on_error_dismissed(state: LifecycleState, event: ErrorDismissed) -> _Result:
    return replace(state, last_error=None), ()


_HANDLERS: dict[type, Callable[[LifecycleState, Event], _Result]] = {
    FlashObserved: _on_flash,
    ThunderObserved: _on_thunder,
    TrackingCancelled: _on_tracking_cancelled,
    LocationSampled: _on_location,
    HeadingSampled: _on_heading,
    BeginHeadingCapture: _on_begin_capture,
    HeadingCaptured: _on_heading_captured,
    RecordHeadingRequested: _on_record_heading,
    HeadingCaptureCancelled: _on_capture_cancelled,
    ClearLocationData: _on_clear_location,
    DeleteStrike: _on_delete,
    AuthorizationChanged: _on_authorization,
    StrikesLoaded: _on_loaded,
    StrikePersisted: _on_persisted,
    StrikeRemoved: _on_removed,
    PersistenceFailed: _on_failed,
    ErrorDismissed: _on_error_dismissed,
}
