"""Interfaces of the external collaborators the monitor reads from."""

from typing import Protocol

from plantwatch.lib.models import AmbientReading, MoistureSample, Plant, TenantId


class PlantRepository(Protocol):
    """Read access to tenants, plants and moisture history."""

    async def list_tenants(self) -> set[TenantId]: ...

    async def list_plants_for_tenant(self, tenant_id: TenantId) -> list[Plant]: ...

    async def get_recent_moisture(
        self, plant_id: int, limit: int = 10
    ) -> list[MoistureSample]:
        """Return up to ``limit`` samples for a plant, newest first."""
        ...


class AmbientReadingSource(Protocol):
    """Source of current room conditions for a plant.

    Implementations raise ReadingUnavailableError when no reading can be
    produced.
    """

    async def get_ambient_reading(self, plant_id: int) -> AmbientReading: ...
