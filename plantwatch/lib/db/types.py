"""Type definitions for database operations."""

from typing import Any, TypedDict

type SQLParams = tuple[Any, ...] | dict[str, Any]
"""SQL parameter types: positional tuple or named dict for query binding."""


class PlantRow(TypedDict):
    """Plant joined with its species and room, as read from the database.

    Species and room columns are None when the reference cannot be joined.
    """

    plant_id: int
    nickname: str
    species_ref: str
    room_name: str | None
    client_id: str
    species_id: str | None
    species_name: str | None
    perfect_light: float | None
    perfect_temperature: float | None
    perfect_humidity: float | None


class MoistureRow(TypedDict):
    """Moisture sample from the plant time series table."""

    plant_id: int
    moisture: float
    recording_time: str
