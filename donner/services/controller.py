"""Lifecycle controller — the single writer that drives the state machine.

The controller owns one observer's ``LifecycleState``. Events are applied
one at a time under a lock, so no caller ever sees a half-applied
transition. Sensor commands are executed inline. Persistence commands go
to a queue drained by one writer task, so the store applies them in the
order they were issued; each outcome comes back as ``StrikePersisted``,
``StrikeRemoved`` or ``PersistenceFailed``.
"""

from __future__ import annotations

import asyncio
import logging

from donner.contracts.common import GeoPoint
from donner.contracts.enums import AuthorizationStatus
from donner.contracts.result import ServiceError
from donner.contracts.sensors import LocationSample
from donner.persistence.errors import PersistenceError
from donner.persistence.repositories.strike_repo import StrikeRepository
from donner.services.clock import Clock, IdGenerator, SystemClock, UUIDGenerator
from donner.services.lifecycle import (
    AuthorizationChanged,
    BeginHeadingCapture,
    ClearLocationData,
    Command,
    DeleteStrike,
    ErrorDismissed,
    Event,
    FlashObserved,
    HeadingCaptureCancelled,
    HeadingCaptured,
    HeadingSampled,
    LifecycleState,
    LocationSampled,
    PersistenceFailed,
    RecordHeadingRequested,
    RemoveStrike,
    SaveStrike,
    StartSensor,
    StopSensor,
    StrikePersisted,
    StrikeRemoved,
    StrikesLoaded,
    ThunderObserved,
    TrackingCancelled,
    UpdateStrike,
    WriteCommand,
    transition,
)
from donner.services.sensors import SensorSource

logger = logging.getLogger(__name__)


class LifecycleController:
    def __init__(
        self,
        user_id: str,
        repository: StrikeRepository,
        sensors: SensorSource,
        *,
        clock: Clock | None = None,
        ids: IdGenerator | None = None,
    ):
        self.user_id = user_id
        self._repository = repository
        self._sensors = sensors
        self._clock = clock or SystemClock()
        self._ids = ids or UUIDGenerator()
        self._state = LifecycleState()
        self._lock = asyncio.Lock()
        self._writes: asyncio.Queue[WriteCommand] = asyncio.Queue()
        self._writer: asyncio.Task | None = None
        self._pump: asyncio.Task | None = None
        self._loaded = False

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def loaded(self) -> bool:
        """Whether the stored strikes have been read successfully."""
        return self._loaded

    # ------------------------------------------------------------------
    # Lifecycle of the controller itself
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Load the stored strikes and begin forwarding sensor samples."""
        await self.load()
        if self._pump is None:
            self._pump = asyncio.create_task(self._pump_samples())
            self._pump.add_done_callback(self._log_task_exit)

    async def load(self) -> None:
        try:
            strikes = await self._repository.fetch_all(self.user_id)
        except PersistenceError as exc:
            logger.warning("Loading strikes for %s failed: %s", self.user_id, exc)
            await self.handle(
                PersistenceFailed(ServiceError(code="load_failed", message=str(exc)))
            )
            return
        await self.handle(StrikesLoaded(tuple(strikes)))
        self._loaded = True

    async def close(self) -> None:
        """Stop the sample pump, drain pending writes and stop the writer."""
        if self._pump is not None:
            self._pump.cancel()
            await asyncio.gather(self._pump, return_exceptions=True)
            self._pump = None
        await self.flush()
        if self._writer is not None:
            self._writer.cancel()
            await asyncio.gather(self._writer, return_exceptions=True)
            self._writer = None

    async def flush(self) -> None:
        """Wait until every write requested so far has completed."""
        if not self._writes.empty():
            self._ensure_writer()
        await self._writes.join()

    # ------------------------------------------------------------------
    # Event entry point
    # ------------------------------------------------------------------

    async def handle(self, event: Event) -> LifecycleState:
        async with self._lock:
            result = transition(self._state, event)
            self._state = result.state
            for command in result.commands:
                await self._execute(command)
            return self._state

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    async def flash(self) -> LifecycleState:
        return await self.handle(
            FlashObserved(at=self._clock.now(), strike_id=self._ids.new_id())
        )

    async def thunder(self) -> LifecycleState:
        return await self.handle(ThunderObserved(at=self._clock.now()))

    async def cancel_tracking(self) -> LifecycleState:
        return await self.handle(TrackingCancelled())

    async def begin_heading_capture(self, strike_id: str) -> LifecycleState:
        return await self.handle(BeginHeadingCapture(strike_id))

    async def capture_heading(self, bearing_deg: float, location: GeoPoint) -> LifecycleState:
        return await self.handle(HeadingCaptured(bearing_deg=bearing_deg, location=location))

    async def record_heading(self) -> LifecycleState:
        return await self.handle(RecordHeadingRequested())

    async def cancel_heading_capture(self) -> LifecycleState:
        return await self.handle(HeadingCaptureCancelled())

    async def clear_location_data(self, strike_id: str) -> LifecycleState:
        return await self.handle(ClearLocationData(strike_id))

    async def delete_strike(self, strike_id: str) -> LifecycleState:
        return await self.handle(DeleteStrike(strike_id))

    async def authorization_changed(self, status: AuthorizationStatus) -> LifecycleState:
        return await self.handle(AuthorizationChanged(status))

    async def dismiss_error(self) -> LifecycleState:
        return await self.handle(ErrorDismissed())

    # ------------------------------------------------------------------
    # Command execution
    # ------------------------------------------------------------------

    async def _execute(self, command: Command) -> None:
        if isinstance(command, StartSensor):
            await self._sensors.start(command.kind)
        elif isinstance(command, StopSensor):
            await self._sensors.stop(command.kind)
        else:
            self._enqueue(command)

    def _enqueue(self, command: WriteCommand) -> None:
        self._writes.put_nowait(command)
        self._ensure_writer()

    def _ensure_writer(self) -> None:
        if self._writer is None or self._writer.done():
            self._writer = asyncio.create_task(self._drain_writes())
            self._writer.add_done_callback(self._log_task_exit)

    async def _drain_writes(self) -> None:
        while True:
            command = await self._writes.get()
            try:
                await self._persist(command)
            finally:
                self._writes.task_done()

    async def _persist(self, command: WriteCommand) -> None:
        if isinstance(command, RemoveStrike):
            operation, strike_id = "delete", command.strike_id
        else:
            operation = "save" if isinstance(command, SaveStrike) else "update"
            strike_id = command.strike.id

        try:
            if isinstance(command, SaveStrike):
                await self._repository.save(self.user_id, command.strike)
            elif isinstance(command, UpdateStrike):
                await self._repository.update(self.user_id, command.strike)
            else:
                await self._repository.delete(self.user_id, command.strike_id)
        except PersistenceError as exc:
            logger.warning("Strike %s %s failed: %s", strike_id, operation, exc)
            await self.handle(
                PersistenceFailed(
                    ServiceError.persistence_failed(operation, strike_id, str(exc)),
                    strike_id=strike_id,
                    revision=command.revision,
                )
            )
            return

        if isinstance(command, RemoveStrike):
            await self.handle(StrikeRemoved(command.strike_id, command.revision))
        else:
            await self.handle(StrikePersisted(command.strike, command.revision))

    async def _pump_samples(self) -> None:
        async for sample in self._sensors.samples():
            if isinstance(sample, LocationSample):
                await self.handle(LocationSampled(sample))
            else:
                await self.handle(HeadingSampled(sample))

    def _log_task_exit(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Background task for %s stopped: %r", self.user_id, exc, exc_info=exc
            )
