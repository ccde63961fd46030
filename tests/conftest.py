"""Shared pytest fixtures for the test suite."""

import logging
import sqlite3
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from plantwatch.lib.conditions import PlantConditionChecker
from plantwatch.lib.config import MoistureSettings, Settings, ToleranceSettings
from plantwatch.lib.config.testing import set_settings
from plantwatch.lib.db import close_db
from plantwatch.lib.exceptions import ReadingUnavailableError
from plantwatch.lib.models import (
    AmbientReading,
    MoistureSample,
    Plant,
    Room,
    Species,
)
from plantwatch.monitor.scanner import TenantScanner

SQL_DIR = Path(__file__).parent.parent / "plantwatch" / "lib" / "sql"


class FakeRepository:
    """In-memory plant repository."""

    def __init__(self) -> None:
        self.plants: dict[str, list[Plant]] = {}
        self.moisture: dict[int, list[MoistureSample]] = {}
        self.failing_tenants: set[str] = set()
        self.failing_moisture: set[int] = set()
        self.moisture_errors: dict[int, Exception] = {}
        self.moisture_calls: list[tuple[int, int]] = []

    def add(self, plant: Plant, moisture: Iterable[float] = ()) -> Plant:
        self.plants.setdefault(plant.tenant_id, []).append(plant)
        now = datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)
        self.moisture[plant.plant_id] = [
            MoistureSample(plant.plant_id, value, now - timedelta(minutes=i))
            for i, value in enumerate(moisture)
        ]
        return plant

    async def list_tenants(self) -> set[str]:
        return set(self.plants)

    async def list_plants_for_tenant(self, tenant_id: str) -> list[Plant]:
        if tenant_id in self.failing_tenants:
            raise OSError(f"plants of {tenant_id} unavailable")
        return list(self.plants.get(tenant_id, []))

    async def get_recent_moisture(
        self, plant_id: int, limit: int = 10
    ) -> list[MoistureSample]:
        self.moisture_calls.append((plant_id, limit))
        if plant_id in self.failing_moisture:
            raise OSError("moisture store unavailable")
        if plant_id in self.moisture_errors:
            raise self.moisture_errors[plant_id]
        return self.moisture.get(plant_id, [])[:limit]


class FakeAmbientSource:
    """Ambient source returning fixed readings per plant."""

    def __init__(self) -> None:
        self.readings: dict[int, AmbientReading] = {}
        self.failing: set[int] = set()
        self.errors: dict[int, Exception] = {}

    async def get_ambient_reading(self, plant_id: int) -> AmbientReading:
        if plant_id in self.failing:
            raise OSError("sensor bridge timed out")
        if plant_id in self.errors:
            raise self.errors[plant_id]
        if plant_id not in self.readings:
            raise ReadingUnavailableError(plant_id)
        return self.readings[plant_id]


@pytest.fixture(autouse=True)
def configure_caplog(caplog):
    """Ensure caplog captures logs from the plantwatch namespace."""
    caplog.set_level(logging.DEBUG, logger="plantwatch")


@pytest.fixture(autouse=True)
def reset_settings():
    """Reset global settings after each test to avoid cross-test pollution."""
    yield
    set_settings(None)


@pytest.fixture
async def test_db(tmp_path):
    """Use a temporary SQLite database with the full schema.

    Yields the database path. Pooled connections are closed afterwards so
    the next test starts from a clean pool.
    """
    db_file = tmp_path / "test.sqlite3"
    set_settings(Settings(db_path=str(db_file)))

    conn = sqlite3.connect(str(db_file))
    for sql_file in sorted(SQL_DIR.glob("init_*.sql")):
        conn.executescript(sql_file.read_text())
    conn.close()

    yield db_file

    await close_db()


@pytest.fixture
def frozen_time():
    """Return a fixed datetime for deterministic tests."""
    return datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def tolerances():
    return ToleranceSettings(
        brightness_slack=0.5, temperature_slack=2.0, humidity_slack=5.0
    )


@pytest.fixture
def moisture_settings():
    return MoistureSettings(too_dry_below=30, too_wet_above=80, window=10)


@pytest.fixture
def monstera():
    return Species(
        species_id="monstera",
        name="Monstera deliciosa",
        perfect_light=500.0,
        perfect_temperature=22.0,
        perfect_humidity=60.0,
    )


@pytest.fixture
def make_plant(monstera):
    """Factory for plants of the monstera species."""

    def _make(
        plant_id: int,
        nickname: str = "Monty",
        tenant_id: str = "alice",
        species: Species | None = None,
    ) -> Plant:
        return Plant(
            plant_id=plant_id,
            nickname=nickname,
            species=species or monstera,
            room=Room(name="Kitchen", client_id=tenant_id),
        )

    return _make


@pytest.fixture
def ideal_reading(monstera, frozen_time):
    """A reading exactly at the monstera's ideal values."""
    return AmbientReading(
        brightness=monstera.perfect_light,
        temperature=monstera.perfect_temperature,
        humidity=monstera.perfect_humidity,
        recording_time=frozen_time,
    )


@pytest.fixture
def repository():
    return FakeRepository()


@pytest.fixture
def ambient_source():
    return FakeAmbientSource()


@pytest.fixture
def checker(tolerances):
    return PlantConditionChecker(tolerances)


@pytest.fixture
def scanner(repository, ambient_source, checker, moisture_settings):
    return TenantScanner(repository, ambient_source, checker, moisture_settings)
