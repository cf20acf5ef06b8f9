"""Tests del dispatcher de mensajes MQTT."""

import json
from unittest.mock import MagicMock

from automation_api.core.pipeline import IngestionProcessor
from automation_api.core.transport.message_handler import MessageDispatcher


NAMESPACE = "iot-funcionando"


def data_topic(device_id):
    return f"{NAMESPACE}/{device_id}/data"


class TestMessageDispatcher:

    def test_telemetry_is_ingested(self, dispatcher, readings):
        dispatcher.handle(data_topic("dev1"), json.dumps({"temperature": 21}).encode())

        assert readings.count() == 1
        assert dispatcher.stats.telemetry == 1
        assert dispatcher.stats.processed == 1

    def test_malformed_message_does_not_affect_next_one(self, dispatcher, readings):
        dispatcher.handle(data_topic("dev1"), b"not json")
        dispatcher.handle(data_topic("dev2"), json.dumps({"humidity": 50}).encode())

        assert dispatcher.stats.malformed == 1
        assert dispatcher.stats.telemetry == 1
        assert readings.list_for_device("dev1") == []
        assert len(readings.list_for_device("dev2")) == 1

    def test_status_message(self, dispatcher, devices):
        devices.register("dev1", "Sensor 1")

        dispatcher.handle(f"{NAMESPACE}/dev1/status", b"online")

        assert devices.get("dev1").status == "online"
        assert dispatcher.stats.status == 1

    def test_unknown_kind_is_ignored(self, dispatcher, readings):
        dispatcher.handle(f"{NAMESPACE}/dev1/config", b"{}")

        assert dispatcher.stats.ignored == 1
        assert readings.count() == 0

    def test_foreign_topic_counts_as_malformed(self, dispatcher):
        dispatcher.handle("other/dev1/data", b"{}")

        assert dispatcher.stats.malformed == 1

    def test_non_numeric_fields_are_dropped(self, dispatcher, readings):
        payload = json.dumps({"temperature": "hot", "humidity": 40}).encode()

        dispatcher.handle(data_topic("dev1"), payload)

        assert [r.sensor_type for r in readings.list_for_device("dev1")] == ["humidity"]

    def test_processor_exception_is_contained(self):
        processor = MagicMock(spec=IngestionProcessor)
        processor.ingest_telemetry.side_effect = RuntimeError("boom")
        dispatcher = MessageDispatcher(processor, NAMESPACE)

        dispatcher.handle(data_topic("dev1"), b'{"temperature": 1}')
        dispatcher.handle(f"{NAMESPACE}/dev1/status", b"online")

        assert dispatcher.stats.failed == 1
        assert dispatcher.stats.received == 2
        processor.ingest_status.assert_called_once_with("dev1", "online")

    def test_stats_to_dict(self, dispatcher):
        dispatcher.handle(data_topic("dev1"), b"{}")

        data = dispatcher.stats.to_dict()
        assert data["received"] == 1
        assert data["last_message_at"] > 0
        assert "started_at" in data
