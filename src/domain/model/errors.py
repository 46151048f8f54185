"""Domain-level exceptions.

Adapters raise these errors to express failures of the outside world;
services turn the expected ones into explicit results.
Route handlers catch the rest and map them to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class UpstreamError(DomainError):
    """The third-party dictionary API failed, timed out, or returned garbage."""


class RecordWriteError(DomainError):
    """A write to a single favorite record failed."""

    def __init__(self, favorite_id: str, reason: str):
        self.favorite_id = favorite_id
        self.reason = reason
        super().__init__(f"Failed to write favorite {favorite_id}: {reason}")


class InfrastructureError(DomainError):
    """Persistence layer unavailable or a transaction could not commit."""
