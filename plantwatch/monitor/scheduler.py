"""Periodic condition check across all tenants.

Each tick reads fresh data for every tenant, evaluates every plant, and
publishes one alert batch per tenant that has alerts. Nothing is carried
over between ticks, so a failed tenant is simply retried on the next one.
"""

import asyncio
from dataclasses import dataclass, field
from typing import override

from plantwatch.lib.config import SchedulerSettings
from plantwatch.lib.db import close_db, init_db
from plantwatch.lib.eventbus import EventPublisher
from plantwatch.lib.models import TenantId
from plantwatch.lib.polling import PeriodicService
from plantwatch.logging import get_logger
from plantwatch.monitor.publisher import AlertPublisher
from plantwatch.monitor.scanner import TenantScanner

logger = get_logger("monitor.scheduler")


@dataclass(slots=True)
class TickReport:
    """Summary of one scheduled scan."""

    tenants: int = 0
    alerts: int = 0
    published: list[TenantId] = field(default_factory=list)
    failed: list[TenantId] = field(default_factory=list)
    skipped: list[TenantId] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class _TenantOutcome:
    tenant_id: TenantId
    alerts: int = 0
    published: bool = False
    failed: bool = False
    skipped: bool = False


class ConditionScheduler(PeriodicService):
    """Runs scan_and_publish() on a fixed interval.

    Ticks never overlap: if a tick is still running when the next one is
    requested, the new one is skipped.
    """

    def __init__(
        self,
        scanner: TenantScanner,
        alert_publisher: AlertPublisher,
        event_publisher: EventPublisher,
        settings: SchedulerSettings,
    ) -> None:
        super().__init__(name="conditions", interval_sec=settings.interval_sec)
        self._scanner = scanner
        self._alert_publisher = alert_publisher
        self._event_publisher = event_publisher
        self._max_concurrent = settings.max_concurrent_tenants
        self._tick_lock = asyncio.Lock()

    @override
    async def initialize(self) -> None:
        """Open the database and connect the event publisher."""
        await init_db()
        self._event_publisher.connect()

    @override
    async def cleanup(self) -> None:
        """Close the event publisher and the database."""
        self._event_publisher.close()
        await close_db()

    @override
    async def tick(self) -> None:
        await self.scan_and_publish()

    async def _process_tenant(
        self, tenant_id: TenantId, semaphore: asyncio.Semaphore
    ) -> _TenantOutcome:
        """Scan one tenant and publish its batch, isolating any failure."""
        async with semaphore:
            if self.shutdown_requested:
                return _TenantOutcome(tenant_id, skipped=True)

            try:
                alerts = await self._scanner.scan_tenant(tenant_id)
            except Exception:
                logger.exception("Condition scan failed for tenant %s", tenant_id)
                return _TenantOutcome(tenant_id, failed=True)

            if not alerts:
                return _TenantOutcome(tenant_id)

            published = await self._alert_publisher.publish_batch(tenant_id, alerts)
            return _TenantOutcome(
                tenant_id,
                alerts=len(alerts),
                published=published,
                failed=not published,
            )

    async def scan_and_publish(self) -> TickReport | None:
        """Run one full scan over all tenants and publish their alerts.

        Returns:
            A report of the tick, or None if a previous tick was still
            running and this one was skipped.
        """
        if self._tick_lock.locked():
            logger.warning("Previous condition check still running, skipping tick")
            return None

        async with self._tick_lock:
            tenants = await self._scanner.list_tenants()
            semaphore = asyncio.Semaphore(self._max_concurrent)
            outcomes = await asyncio.gather(
                *(self._process_tenant(t, semaphore) for t in tenants)
            )

        report = TickReport(tenants=len(tenants))
        for outcome in outcomes:
            report.alerts += outcome.alerts
            if outcome.published:
                report.published.append(outcome.tenant_id)
            if outcome.failed:
                report.failed.append(outcome.tenant_id)
            if outcome.skipped:
                report.skipped.append(outcome.tenant_id)

        logger.info(
            "Condition check: %d tenant(s), %d alert(s), %d published, %d failed",
            report.tenants,
            report.alerts,
            len(report.published),
            len(report.failed),
        )
        return report
