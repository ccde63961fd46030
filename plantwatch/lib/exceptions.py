"""Custom exceptions for the Plantwatch application.

Failures are scoped to the narrowest unit they affect (a plant, then a
tenant), so each exception carries enough context to log and move on.
"""


class PlantwatchError(Exception):
    """Base exception for all application errors."""


class DatabaseError(PlantwatchError):
    """Base exception for database-related errors."""


class DatabaseNotConnectedError(DatabaseError):
    """Raised when attempting database operations without a connection."""

    def __init__(self, message: str = "Database not connected") -> None:
        super().__init__(message)


class ReadingUnavailableError(PlantwatchError):
    """Raised when no ambient reading can be produced for a plant."""

    def __init__(self, plant_id: int, reason: str = "no reading source") -> None:
        super().__init__(f"Ambient reading unavailable for plant {plant_id}: {reason}")
        self.plant_id = plant_id


class MissingReferenceError(PlantwatchError):
    """Raised when a plant's species or room cannot be resolved."""

    def __init__(self, plant_id: int, missing: str) -> None:
        super().__init__(f"Plant {plant_id} has no resolvable {missing}")
        self.plant_id = plant_id


class PublishError(PlantwatchError):
    """Base exception for alert publishing errors."""


class SerializationError(PublishError):
    """Raised when an alert batch cannot be serialized."""
