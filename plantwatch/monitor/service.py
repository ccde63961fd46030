"""Wiring for the condition monitor.

Builds the scanner, publisher and scheduler from settings. The web server
uses create_scanner() too, so on-demand checks run exactly the same
evaluation as scheduled ticks.
"""

from plantwatch.lib.ambient import create_ambient_source
from plantwatch.lib.collaborators import AmbientReadingSource, PlantRepository
from plantwatch.lib.conditions import PlantConditionChecker
from plantwatch.lib.config import Settings, get_settings
from plantwatch.lib.db import SQLitePlantRepository
from plantwatch.lib.eventbus import get_publisher
from plantwatch.logging import configure, get_logger
from plantwatch.monitor.publisher import AlertPublisher
from plantwatch.monitor.scanner import TenantScanner
from plantwatch.monitor.scheduler import ConditionScheduler

logger = get_logger("monitor.service")


def create_scanner(
    settings: Settings | None = None,
    repository: PlantRepository | None = None,
    ambient_source: AmbientReadingSource | None = None,
) -> TenantScanner:
    """Create a tenant scanner with collaborators chosen from settings."""
    settings = settings or get_settings()
    return TenantScanner(
        repository=repository or SQLitePlantRepository(),
        ambient_source=ambient_source or create_ambient_source(),
        checker=PlantConditionChecker(settings.tolerances),
        moisture=settings.moisture,
    )


def create_scheduler(settings: Settings | None = None) -> ConditionScheduler:
    """Create the condition scheduler and its dependencies."""
    settings = settings or get_settings()
    event_publisher = get_publisher()
    return ConditionScheduler(
        scanner=create_scanner(settings),
        alert_publisher=AlertPublisher(event_publisher, settings.eventbus),
        event_publisher=event_publisher,
        settings=settings.scheduler,
    )


def main() -> None:
    """Main entry point for the condition monitor."""
    configure()
    scheduler = create_scheduler()
    logger.info(
        "Checking plant conditions every %.0fs", scheduler.interval_sec
    )
    scheduler.run()
