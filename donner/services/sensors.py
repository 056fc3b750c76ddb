"""Sensor gateway: start/stop contract and the queue-fed live source.

The device streams position fixes and compass readings to the service,
which pushes them into a ``QueueSensorSource``. Only the latest sample per
sensor kind is kept; samples for a sensor that is not running are dropped.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Protocol, Union

from donner.contracts.enums import SensorKind
from donner.contracts.sensors import HeadingSample, LocationSample

logger = logging.getLogger(__name__)

Sample = Union[LocationSample, HeadingSample]


class SensorSource(Protocol):
    async def start(self, kind: SensorKind) -> None:
        ...

    async def stop(self, kind: SensorKind) -> None:
        ...

    def samples(self) -> AsyncIterator[Sample]:
        """Endless stream of samples from running sensors."""
        ...


class QueueSensorSource:
    """Sensor source fed by ``push()``."""

    def __init__(self):
        self._active: set[SensorKind] = set()
        self._latest: dict[SensorKind, Sample] = {}
        self._ready = asyncio.Event()

    @property
    def active(self) -> frozenset[SensorKind]:
        return frozenset(self._active)

    async def start(self, kind: SensorKind) -> None:
        self._active.add(kind)
        logger.debug("Started %s sensor", kind.value)

    async def stop(self, kind: SensorKind) -> None:
        self._active.discard(kind)
        self._latest.pop(kind, None)
        logger.debug("Stopped %s sensor", kind.value)

    def push(self, sample: Sample) -> bool:
        """Offer a sample. Returns False when its sensor is not running."""
        if sample.kind not in self._active:
            return False
        self._latest[sample.kind] = sample
        self._ready.set()
        return True

    async def samples(self) -> AsyncIterator[Sample]:
        while True:
            await self._ready.wait()
            self._ready.clear()
            pending, self._latest = self._latest, {}
            for sample in pending.values():
                yield sample
