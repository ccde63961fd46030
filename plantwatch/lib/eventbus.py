"""Redis-based event bus for publishing plant condition alerts.

Each tenant has its own channel, named ``<topic prefix>/<tenant id>``.
Clients subscribe to their tenant's channel to receive alert batches.
"""

import json
from collections.abc import Sequence
from typing import Any, Protocol

import redis

from plantwatch.lib.config import get_settings
from plantwatch.lib.exceptions import PublishError, SerializationError
from plantwatch.logging import get_logger

logger = get_logger("lib.eventbus")


class Payload(Protocol):
    """Anything that can be turned into a JSON-compatible dict."""

    def to_dict(self) -> dict[str, Any]: ...


def channel_for(tenant_id: str, prefix: str | None = None) -> str:
    """Return the notification channel name for a tenant."""
    if prefix is None:
        prefix = get_settings().eventbus.topic_prefix
    return f"{prefix}/{tenant_id}"


def serialize(data: Payload | Sequence[Payload]) -> str:
    """Serialize a payload or a list of payloads to JSON.

    Raises:
        SerializationError: If the payload cannot be encoded.
    """
    try:
        if isinstance(data, Sequence):
            return json.dumps([item.to_dict() for item in data])
        return json.dumps(data.to_dict())
    except (TypeError, ValueError, AttributeError) as e:
        raise SerializationError(f"Cannot serialize payload: {e}") from e


class EventPublisher:
    """Publishes messages to Redis channels."""

    def __init__(self, redis_url: str | None = None) -> None:
        self._redis_url = redis_url or get_settings().eventbus.redis_url
        self._client: redis.Redis | None = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    def connect(self) -> None:
        """Connect to Redis."""
        self._client = redis.from_url(self._redis_url)
        logger.info("Event publisher connected to Redis")

    def publish(self, channel: str, message: str) -> int:
        """Publish an already serialized message to a channel.

        Returns:
            Number of subscribers that received the message.

        Raises:
            PublishError: If the publisher is not connected.
            redis.RedisError: If the transport fails.
        """
        if self._client is None:
            raise PublishError("Event publisher not connected")

        receivers = self._client.publish(channel, message)
        logger.debug("Published to %s: %s", channel, message)
        return int(receivers)

    def close(self) -> None:
        """Close the publisher connection."""
        if self._client is not None:
            self._client.close()
            self._client = None
        logger.info("Event publisher closed")


# Global publisher instance (initialized by the monitor)
_publisher: EventPublisher | None = None


def get_publisher() -> EventPublisher:
    """Get or create the global publisher instance."""
    global _publisher
    if _publisher is None:
        _publisher = EventPublisher()
    return _publisher
