"""Plant repository backed by the SQLite database."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import cast

import aiosqlite

from plantwatch.lib.db.connection import Database, get_db, load_template
from plantwatch.lib.db.types import MoistureRow, PlantRow
from plantwatch.lib.exceptions import DatabaseError, MissingReferenceError
from plantwatch.lib.models import MoistureSample, Plant, Room, Species, TenantId
from plantwatch.logging import get_logger

logger = get_logger("lib.db.queries")

# Raised when a stored value does not have the expected type or format
_ROW_ERRORS = (KeyError, TypeError, ValueError)


@asynccontextmanager
async def _reading(what: str) -> AsyncIterator[Database]:
    """Get a connection, translating driver errors into DatabaseError."""
    try:
        async with get_db() as db:
            yield db
    except aiosqlite.Error as e:
        raise DatabaseError(f"Failed to read {what}: {e}") from e


def _plant_from_row(row: PlantRow) -> Plant:
    """Build a Plant from a joined row.

    Raises:
        MissingReferenceError: If the species or room could not be joined.
    """
    if row["species_id"] is None:
        raise MissingReferenceError(row["plant_id"], "species")
    if row["room_name"] is None:
        raise MissingReferenceError(row["plant_id"], "room")

    species = Species(
        species_id=row["species_id"],
        name=row["species_name"] or "",
        perfect_light=cast(float, row["perfect_light"]),
        perfect_temperature=cast(float, row["perfect_temperature"]),
        perfect_humidity=cast(float, row["perfect_humidity"]),
    )
    return Plant(
        plant_id=row["plant_id"],
        nickname=row["nickname"],
        species=species,
        room=Room(name=row["room_name"], client_id=row["client_id"]),
    )


def _sample_from_row(row: MoistureRow) -> MoistureSample:
    return MoistureSample(
        plant_id=row["plant_id"],
        moisture=float(row["moisture"]),
        recording_time=datetime.fromisoformat(row["recording_time"]),
    )


class SQLitePlantRepository:
    """Read-only access to tenants, plants and moisture history."""

    async def list_tenants(self) -> set[TenantId]:
        """Return the distinct client ids across all rooms."""
        async with _reading("tenants") as db:
            rows = await db.fetchall(load_template("list_tenants.sql"))
        return {row["client_id"] for row in rows}

    async def list_plants_for_tenant(self, tenant_id: TenantId) -> list[Plant]:
        """Return every plant owned by a tenant, ordered by id.

        Plants whose species or room cannot be resolved are skipped with a
        warning rather than failing the whole tenant.
        """
        async with _reading(f"plants of tenant {tenant_id}") as db:
            rows = await db.fetchall(
                load_template("plants_for_tenant.sql"), {"client_id": tenant_id}
            )

        plants: list[Plant] = []
        for row in cast(list[PlantRow], rows):
            try:
                plants.append(_plant_from_row(row))
            except MissingReferenceError as e:
                logger.warning("Skipping plant for tenant %s: %s", tenant_id, e)
            except _ROW_ERRORS as e:
                logger.warning(
                    "Skipping malformed plant row for tenant %s: %s", tenant_id, e
                )
        return plants

    async def get_recent_moisture(
        self, plant_id: int, limit: int = 10
    ) -> list[MoistureSample]:
        """Return up to ``limit`` moisture samples, newest first.

        Raises:
            DatabaseError: If the query fails or a stored sample is malformed.
        """
        async with _reading(f"moisture of plant {plant_id}") as db:
            rows = await db.fetchall(
                load_template("recent_moisture.sql"),
                {"plant_id": plant_id, "limit": limit},
            )
        try:
            return [_sample_from_row(row) for row in cast(list[MoistureRow], rows)]
        except _ROW_ERRORS as e:
            raise DatabaseError(
                f"Malformed moisture history for plant {plant_id}: {e}"
            ) from e
