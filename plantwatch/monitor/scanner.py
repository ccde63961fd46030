"""Per-tenant condition scan.

Walks every plant a tenant owns, gathers the inputs the condition checker
needs from the external collaborators, and concatenates the alerts. Input
failures are scoped to the plant and to the input concerned: a plant with
no moisture history still gets its ambient checks, and a plant without an
ambient reading still gets its moisture check.
"""

import math

from plantwatch.lib.collaborators import AmbientReadingSource, PlantRepository
from plantwatch.lib.conditions import PlantConditionChecker
from plantwatch.lib.config import MoistureSettings, MoistureState
from plantwatch.lib.exceptions import PlantwatchError, ReadingUnavailableError
from plantwatch.lib.models import Alert, AmbientReading, Plant, TenantId
from plantwatch.lib.moisture import aggregate
from plantwatch.logging import get_logger

logger = get_logger("monitor.scanner")

_COLLABORATOR_ERRORS = (PlantwatchError, OSError)


class TenantScanner:
    """Collects the alerts for all plants of a tenant."""

    def __init__(
        self,
        repository: PlantRepository,
        ambient_source: AmbientReadingSource,
        checker: PlantConditionChecker,
        moisture: MoistureSettings,
    ) -> None:
        self._repository = repository
        self._ambient_source = ambient_source
        self._checker = checker
        self._moisture = moisture

    async def list_tenants(self) -> list[TenantId]:
        """Return the known tenants in a stable order."""
        return sorted(await self._repository.list_tenants())

    async def _moisture_state(self, plant: Plant) -> MoistureState | None:
        """Aggregate the plant's recent moisture, None when unavailable."""
        try:
            samples = await self._repository.get_recent_moisture(
                plant.plant_id, limit=self._moisture.window
            )
        except _COLLABORATOR_ERRORS as e:
            logger.warning(
                "Moisture history unavailable for plant %d: %s",
                plant.plant_id,
                e,
            )
            return None
        except Exception:
            logger.exception(
                "Unexpected error loading moisture history for plant %d",
                plant.plant_id,
            )
            return None

        finite = [s for s in samples if math.isfinite(s.moisture)]
        if len(finite) < len(samples):
            logger.warning(
                "Ignoring %d non-finite moisture sample(s) for plant %d",
                len(samples) - len(finite),
                plant.plant_id,
            )
        if not finite:
            logger.debug(
                "No moisture history for plant %d, skipping moisture check",
                plant.plant_id,
            )
            return None
        return aggregate(finite, self._moisture)

    async def _ambient_reading(self, plant: Plant) -> AmbientReading | None:
        """Fetch the plant's ambient reading, None when unavailable."""
        try:
            reading = await self._ambient_source.get_ambient_reading(plant.plant_id)
        except ReadingUnavailableError as e:
            logger.debug("%s, skipping threshold checks", e)
            return None
        except _COLLABORATOR_ERRORS as e:
            logger.warning(
                "Ambient reading failed for plant %d: %s", plant.plant_id, e
            )
            return None
        except Exception:
            logger.exception(
                "Unexpected error reading ambient conditions for plant %d",
                plant.plant_id,
            )
            return None

        if not reading.is_finite():
            logger.warning(
                "Non-finite ambient reading for plant %d, skipping threshold checks",
                plant.plant_id,
            )
            return None
        return reading

    async def scan_plant(self, plant: Plant) -> list[Alert]:
        """Evaluate a single plant."""
        moisture_state = await self._moisture_state(plant)
        reading = await self._ambient_reading(plant)
        return self._checker.evaluate(plant, reading, moisture_state)

    async def scan_tenant(self, tenant_id: TenantId) -> list[Alert]:
        """Collect alerts across every plant owned by a tenant.

        Alerts keep the order plants are returned in by the repository, and
        per plant the order brightness, temperature, humidity, moisture.

        Raises:
            PlantwatchError: If the tenant's plants cannot be listed.
        """
        plants = await self._repository.list_plants_for_tenant(tenant_id)

        alerts: list[Alert] = []
        for plant in plants:
            try:
                alerts.extend(await self.scan_plant(plant))
            except Exception:
                logger.exception(
                    "Condition check failed for plant %d of tenant %s",
                    plant.plant_id,
                    tenant_id,
                )

        logger.debug(
            "Tenant %s: %d plant(s), %d alert(s)",
            tenant_id,
            len(plants),
            len(alerts),
        )
        return alerts

    async def check_tenant(self, tenant_id: TenantId) -> list[Alert]:
        """On-demand check for one tenant.

        Runs exactly the evaluation a scheduled tick performs for the
        tenant, without publishing anything.
        """
        return await self.scan_tenant(tenant_id)
