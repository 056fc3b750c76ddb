"""Repository for completed strikes — the lifecycle's persistence gateway."""

from __future__ import annotations

import logging

from google.api_core.exceptions import GoogleAPIError

from donner.contracts.strike import Strike
from donner.persistence.errors import StrikeReadError, StrikeWriteError
from donner.persistence.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class StrikeRepository(BaseRepository[Strike]):
    """Strikes under ``/users/{user_id}/strikes/{strike_id}``.

    Firestore client errors are re-raised as ``PersistenceError`` subclasses.
    Each call is a single document write, so a failure leaves the stored
    strike as it was. No retry here.
    """

    def __init__(self):
        super().__init__(Strike, "strikes")

    async def get(self, user_id: str, doc_id: str) -> Strike | None:
        try:
            return await super().get(user_id, doc_id)
        except GoogleAPIError as exc:
            raise StrikeReadError(f"reading strike {doc_id} failed: {exc}") from exc

    async def fetch_all(self, user_id: str) -> list[Strike]:
        """Every stored strike, oldest first."""
        try:
            strikes = await self.list_all(user_id)
        except GoogleAPIError as exc:
            raise StrikeReadError(f"listing strikes failed: {exc}") from exc
        return sorted(strikes, key=lambda s: s.lightning_time)

    async def save(self, user_id: str, strike: Strike) -> None:
        """Store a newly completed strike."""
        await self._write("save", user_id, strike)

    async def update(self, user_id: str, strike: Strike) -> None:
        """Overwrite a stored strike (heading fix set or cleared)."""
        await self._write("update", user_id, strike)

    async def delete(self, user_id: str, doc_id: str) -> None:
        try:
            await super().delete(user_id, doc_id)
        except GoogleAPIError as exc:
            raise StrikeWriteError("delete", doc_id, str(exc)) from exc
        logger.info("Deleted strike %s", doc_id)

    async def _write(self, operation: str, user_id: str, strike: Strike) -> None:
        try:
            await self.put(user_id, strike.id, strike)
        except GoogleAPIError as exc:
            raise StrikeWriteError(operation, strike.id, str(exc)) from exc
        logger.info("Strike %s stored (%s)", strike.id, operation)
