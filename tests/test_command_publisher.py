"""Tests del publicador de comandos y del reloj de timestamps."""

from datetime import datetime, timedelta
from unittest.mock import patch

from automation_api.core.clock import TimestampClock
from automation_api.core.domain.events import CommandEvent


NAMESPACE = "iot-funcionando"


class TestCommandPublisher:

    def test_topic_for(self, publisher):
        assert publisher.topic_for("dev1") == f"{NAMESPACE}/dev1/command"

    def test_publish_plain_action_qos1(self, publisher, transport):
        ok = publisher.publish(CommandEvent(device_id="dev1", action="LED_OFF"))

        assert ok is True
        transport.publish.assert_called_once_with(f"{NAMESPACE}/dev1/command", "LED_OFF", qos=1)
        assert publisher.stats.to_dict() == {"published": 1, "failed": 0}

    def test_rejected_publish(self, publisher, transport):
        transport.publish.return_value = False

        assert publisher.publish(CommandEvent(device_id="dev1", action="X")) is False
        assert publisher.stats.failed == 1

    def test_transport_exception_is_reported(self, publisher, transport):
        transport.publish.side_effect = ConnectionError("broker down")

        assert publisher.publish(CommandEvent(device_id="dev1", action="X")) is False
        assert publisher.stats.failed == 1


class TestTimestampClock:

    def test_never_goes_backwards(self):
        clock = TimestampClock()
        t1 = datetime(2024, 1, 1, 12, 0, 0)
        t0 = t1 - timedelta(seconds=5)

        with patch("automation_api.core.clock.utc_now", side_effect=[t1, t0]):
            first = clock.now()
            second = clock.now()

        assert first == t1
        assert second == t1

    def test_naive_utc(self):
        assert TimestampClock().now().tzinfo is None
