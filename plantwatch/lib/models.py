"""Domain models for plants, their reference data and condition alerts."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

type TenantId = str
"""Owner grouping derived from the distinct client ids across rooms."""


@dataclass(frozen=True, slots=True)
class Species:
    """Reference data describing the conditions a species prefers."""

    species_id: str
    perfect_light: float
    perfect_temperature: float
    perfect_humidity: float
    name: str = ""


@dataclass(frozen=True, slots=True)
class Room:
    """A room owned by one tenant, identified by (name, client_id)."""

    name: str
    client_id: TenantId


@dataclass(frozen=True, slots=True)
class Plant:
    """A plant placed in exactly one room and of exactly one species."""

    plant_id: int
    nickname: str
    species: Species
    room: Room

    @property
    def tenant_id(self) -> TenantId:
        return self.room.client_id


@dataclass(frozen=True, slots=True)
class AmbientReading:
    """Conditions in a plant's room at evaluation time."""

    brightness: float
    temperature: float
    humidity: float
    recording_time: datetime

    def is_finite(self) -> bool:
        """Whether every measured value is a real number (no NaN or inf)."""
        return all(
            math.isfinite(v) for v in (self.brightness, self.temperature, self.humidity)
        )


@dataclass(frozen=True, slots=True)
class MoistureSample:
    """A single soil moisture measurement for a plant."""

    plant_id: int
    moisture: float
    recording_time: datetime


@dataclass(frozen=True, slots=True)
class Alert:
    """A human-readable notice that a plant is outside its ideal range."""

    plant_id: int
    plant_name: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        """Convert alert to dictionary for JSON serialization."""
        return {
            "plantId": self.plant_id,
            "plantName": self.plant_name,
            "message": self.message,
        }
