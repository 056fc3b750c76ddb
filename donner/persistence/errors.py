"""Persistence-specific exceptions."""


class PersistenceError(Exception):
    """Base exception for all persistence errors."""


class StrikeWriteError(PersistenceError):
    """Raised when a strike could not be written to or removed from Firestore."""

    def __init__(self, operation: str, strike_id: str, reason: str):
        self.operation = operation
        self.strike_id = strike_id
        self.reason = reason
        super().__init__(f"{operation} strikes/{strike_id} failed: {reason}")


class StrikeReadError(PersistenceError):
    """Raised when the strike collection could not be read."""
