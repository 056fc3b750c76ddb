"""Time and identifier capabilities injected into the lifecycle controller."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Current UTC time."""
        ...


class IdGenerator(Protocol):
    def new_id(self) -> str:
        """A fresh, never reused strike identifier."""
        ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(tz=timezone.utc)


class UUIDGenerator:
    def new_id(self) -> str:
        return str(uuid.uuid4())
