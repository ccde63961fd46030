"""Publishes a tenant's alert batch to its notification channel."""

from collections.abc import Sequence

import redis

from plantwatch.lib.config import EventBusSettings
from plantwatch.lib.eventbus import EventPublisher, channel_for, serialize
from plantwatch.lib.exceptions import SerializationError
from plantwatch.lib.models import Alert, TenantId
from plantwatch.lib.retry import with_retry
from plantwatch.logging import get_logger

logger = get_logger("monitor.publisher")


class AlertPublisher:
    """Sends one JSON batch of alerts per tenant.

    Empty batches are never published. Failures are logged and reported
    through the return value; they are never raised, so one tenant's
    failure cannot affect another's.
    """

    def __init__(self, publisher: EventPublisher, settings: EventBusSettings) -> None:
        self._publisher = publisher
        self._settings = settings

    def channel(self, tenant_id: TenantId) -> str:
        return channel_for(tenant_id, self._settings.topic_prefix)

    async def publish_batch(
        self, tenant_id: TenantId, alerts: Sequence[Alert]
    ) -> bool:
        """Publish a tenant's alerts as a single message.

        Returns:
            True if a message was published, False if the batch was empty
            or could not be serialized or delivered.
        """
        if not alerts:
            return False

        try:
            message = serialize(alerts)
        except SerializationError as e:
            logger.error("Skipping publish for tenant %s: %s", tenant_id, e)
            return False

        channel = self.channel(tenant_id)
        published = await with_retry(
            lambda: self._publisher.publish(channel, message),
            name=f"Publish to {channel}",
            logger=logger,
            max_retries=self._settings.publish_max_retries,
            initial_backoff_sec=self._settings.publish_backoff_sec,
            retryable_exceptions=(redis.RedisError, OSError),
            run_in_thread=True,
        )
        if published:
            logger.info(
                "Published %d alert(s) for tenant %s to %s",
                len(alerts),
                tenant_id,
                channel,
            )
        return published
