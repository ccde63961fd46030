"""Ambient reading sources.

The live sensor bridge that reports room conditions per plant does not
exist yet, so the default source always fails. The monitor treats that as
a normal, recoverable condition and skips threshold checks.
"""

from plantwatch.lib.collaborators import AmbientReadingSource
from plantwatch.lib.exceptions import ReadingUnavailableError
from plantwatch.lib.models import AmbientReading
from plantwatch.logging import get_logger

logger = get_logger("lib.ambient")


class UnavailableAmbientSource:
    """Ambient source used when no sensor bridge is configured."""

    async def get_ambient_reading(self, plant_id: int) -> AmbientReading:
        raise ReadingUnavailableError(plant_id, "sensor bridge not implemented")


def create_ambient_source() -> AmbientReadingSource:
    """Create the ambient source based on configuration."""
    from plantwatch.lib.config import get_settings

    if get_settings().mock_sensors:
        from plantwatch.lib.mock import MockAmbientSource

        logger.info("Using mock ambient reading source")
        return MockAmbientSource()
    return UnavailableAmbientSource()
