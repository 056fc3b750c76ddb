"""User-visible failure notifications."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class ServiceError(BaseModel):
    """Structured error surfaced to the presentation layer.

    Raised failures from collaborators (persistence, sensors) are converted
    into one of these at the lifecycle boundary instead of propagating.
    """

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, str | int | float | bool | None] | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))

    model_config = ConfigDict(frozen=True)

    @classmethod
    def persistence_failed(
        cls, operation: str, strike_id: str, message: str
    ) -> "ServiceError":
        return cls(
            code="persistence_failed",
            message=message,
            details={"operation": operation, "strike_id": strike_id},
        )
