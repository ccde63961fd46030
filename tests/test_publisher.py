"""Tests for publishing tenant alert batches."""

import json
from unittest.mock import MagicMock

import pytest
import redis

from plantwatch.lib.config import EventBusSettings
from plantwatch.lib.eventbus import EventPublisher
from plantwatch.lib.exceptions import PublishError
from plantwatch.lib.models import Alert
from plantwatch.monitor.publisher import AlertPublisher


@pytest.fixture
def event_publisher():
    publisher = MagicMock(spec=EventPublisher)
    publisher.publish.return_value = 1
    return publisher


@pytest.fixture
def alert_publisher(event_publisher):
    settings = EventBusSettings(
        topic_prefix="plant-conditions",
        publish_max_retries=3,
        publish_backoff_sec=0,
    )
    return AlertPublisher(event_publisher, settings)


class TestAlertPublisher:
    """Tests for AlertPublisher.publish_batch()."""

    def test_channel_name(self, alert_publisher):
        assert alert_publisher.channel("alice") == "plant-conditions/alice"

    async def test_publishes_batch_as_one_message(
        self, alert_publisher, event_publisher
    ):
        alerts = [
            Alert(1, "Monty", "It's too hot for Monty!"),
            Alert(2, "Fern", "Fern's soil is too dry!"),
        ]

        assert await alert_publisher.publish_batch("alice", alerts) is True

        event_publisher.publish.assert_called_once()
        channel, message = event_publisher.publish.call_args[0]
        assert channel == "plant-conditions/alice"
        assert json.loads(message) == [
            {"plantId": 1, "plantName": "Monty", "message": "It's too hot for Monty!"},
            {"plantId": 2, "plantName": "Fern", "message": "Fern's soil is too dry!"},
        ]

    async def test_field_order(self, alert_publisher, event_publisher):
        await alert_publisher.publish_batch("alice", [Alert(1, "Monty", "hi")])

        _, message = event_publisher.publish.call_args[0]
        assert list(json.loads(message)[0]) == ["plantId", "plantName", "message"]

    async def test_empty_batch_not_published(self, alert_publisher, event_publisher):
        assert await alert_publisher.publish_batch("alice", []) is False
        event_publisher.publish.assert_not_called()

    async def test_serialization_failure_skips_tenant(
        self, alert_publisher, event_publisher, caplog
    ):
        bad = Alert(1, "Monty", object())  # type: ignore[arg-type]

        assert await alert_publisher.publish_batch("alice", [bad]) is False
        event_publisher.publish.assert_not_called()
        assert "Skipping publish for tenant alice" in caplog.text

    async def test_transport_failure_retried(self, alert_publisher, event_publisher):
        event_publisher.publish.side_effect = [redis.ConnectionError("down"), 1]

        assert await alert_publisher.publish_batch("alice", [Alert(1, "M", "x")]) is True
        assert event_publisher.publish.call_count == 2

    async def test_transport_failure_gives_up(
        self, alert_publisher, event_publisher, caplog
    ):
        event_publisher.publish.side_effect = redis.ConnectionError("down")

        assert await alert_publisher.publish_batch("alice", [Alert(1, "M", "x")]) is False
        assert event_publisher.publish.call_count == 3
        assert "failed after 3 attempts" in caplog.text

    async def test_not_connected_is_not_retried(self, alert_publisher, event_publisher):
        event_publisher.publish.side_effect = PublishError("Event publisher not connected")

        assert await alert_publisher.publish_batch("alice", [Alert(1, "M", "x")]) is False
        assert event_publisher.publish.call_count == 1
