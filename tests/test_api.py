"""Tests de la API HTTP (FastAPI TestClient, SQLite en memoria, MQTT mockeado)."""

from dataclasses import replace
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from automation_api.core.transport.mqtt_client import MQTTClient
from automation_api.main import create_app


NAMESPACE = "iot-funcionando"


@pytest.fixture
def mqtt_client():
    client = MagicMock(spec=MQTTClient)
    client.connect.return_value = True
    client.publish.return_value = True
    client.is_connected = True
    return client


@pytest.fixture
def api(settings, engine, mqtt_client):
    app = create_app(settings, engine=engine, mqtt_client=mqtt_client)
    with TestClient(app) as client:
        yield client


# =============================================================================
# HEALTH
# =============================================================================

class TestHealth:

    def test_health(self, api):
        assert api.get("/health").json() == {"status": "ok"}

    def test_metrics(self, api):
        api.app.state.receiver.dispatcher.handle(f"{NAMESPACE}/dev1/data", b'{"temperature": 20}')

        r = api.get("/metrics")

        assert r.status_code == 200
        assert "automation_mqtt_messages_received_total" in r.text
        assert "automation_readings_stored_total" in r.text

    def test_ready(self, api):
        r = api.get("/ready")

        assert r.status_code == 200
        assert r.json() == {"status": "ready"}

    def test_receiver_health(self, api, mqtt_client):
        body = api.get("/health/receiver").json()

        assert body["running"] is True
        assert body["mqtt_connected"] is True
        assert body["stats"]["namespace"] == NAMESPACE
        mqtt_client.connect.assert_called_once()

    def test_mqtt_disabled(self, settings, engine, mqtt_client):
        app = create_app(replace(settings, mqtt_enabled=False), engine=engine, mqtt_client=mqtt_client)
        with TestClient(app) as client:
            assert client.get("/health/receiver").json()["running"] is False

        mqtt_client.connect.assert_not_called()


# =============================================================================
# DEVICES
# =============================================================================

class TestDevicesAPI:

    def test_register_and_get(self, api):
        r = api.post("/api/devices", json={"device_id": "dev1", "name": "Sensor 1", "location": "lab"})

        assert r.status_code == 201
        assert r.json()["status"] == "offline"

        body = api.get("/api/devices/dev1").json()
        assert body["name"] == "Sensor 1"
        assert body["location"] == "lab"
        assert body["last_seen"] is None

    def test_register_duplicate(self, api):
        api.post("/api/devices", json={"device_id": "dev1", "name": "A"})

        r = api.post("/api/devices", json={"device_id": "dev1", "name": "B"})

        assert r.status_code == 409

    def test_register_missing_name(self, api):
        assert api.post("/api/devices", json={"device_id": "dev1"}).status_code == 422

    def test_get_missing(self, api):
        assert api.get("/api/devices/nope").status_code == 404

    def test_list_update_delete(self, api):
        api.post("/api/devices", json={"device_id": "dev1", "name": "A"})

        assert [d["device_id"] for d in api.get("/api/devices").json()] == ["dev1"]

        r = api.put("/api/devices/dev1", json={"name": "Renamed", "type": "esp32"})
        assert r.json() == {"message": "Device updated", "changes": 1}
        assert api.get("/api/devices/dev1").json()["type"] == "esp32"

        r = api.delete("/api/devices/dev1")
        assert r.json() == {"message": "Device deleted", "changes": 1}
        assert api.get("/api/devices").json() == []

    def test_readings_endpoints(self, api):
        receiver = api.app.state.receiver
        receiver.ingestion.ingest_telemetry("dev1", {"temperature": 20, "humidity": 40})
        receiver.ingestion.ingest_telemetry("dev1", {"temperature": 25})

        data = api.get("/api/devices/dev1/data", params={"limit": 2}).json()
        assert len(data) == 2
        assert data[0]["sensor_type"] == "temperature"
        assert data[0]["value"] == 25.0

        latest = {r["sensor_type"]: r for r in api.get("/api/devices/dev1/latest").json()}
        assert latest["temperature"]["value"] == 25.0
        assert latest["humidity"]["unit"] == "%"

    def test_readings_limit_validation(self, api):
        assert api.get("/api/devices/dev1/data", params={"limit": 0}).status_code == 422


# =============================================================================
# COMANDOS
# =============================================================================

class TestCommandsAPI:

    def test_send_command(self, api, mqtt_client):
        r = api.post("/api/devices/dev1/command", json={"command": "LED_ON"})

        assert r.status_code == 200
        assert r.json() == {
            "message": "Command sent",
            "topic": f"{NAMESPACE}/dev1/command",
            "command": "LED_ON",
        }
        mqtt_client.publish.assert_called_once_with(f"{NAMESPACE}/dev1/command", "LED_ON", qos=1)

    def test_send_command_failure(self, api, mqtt_client):
        mqtt_client.publish.return_value = False

        r = api.post("/api/devices/dev1/command", json={"command": "LED_ON"})

        assert r.status_code == 500
        assert r.json()["detail"] == "Failed to send command"


# =============================================================================
# AUTOMATIONS
# =============================================================================

class TestAutomationsAPI:

    RULE = {
        "name": "Fan",
        "device_id": "dev1",
        "sensor_type": "temperature",
        "condition": "greater",
        "threshold": 30,
        "action": "FAN_ON",
    }

    def test_create_and_list(self, api):
        r = api.post("/api/automations", json=self.RULE)

        assert r.status_code == 201
        body = r.json()
        assert body["active"] is True
        assert body["threshold"] == 30.0

        assert [a["id"] for a in api.get("/api/automations").json()] == [body["id"]]

    def test_invalid_condition(self, api):
        r = api.post("/api/automations", json={**self.RULE, "condition": "between"})

        assert r.status_code == 422

    def test_toggle_and_delete(self, api):
        rule_id = api.post("/api/automations", json=self.RULE).json()["id"]

        r = api.put(f"/api/automations/{rule_id}/toggle")
        assert r.json() == {"message": "Automation toggled", "changes": 1}
        assert api.get("/api/automations").json()[0]["active"] is False

        r = api.delete(f"/api/automations/{rule_id}")
        assert r.json()["changes"] == 1

    def test_created_rule_applies_to_next_telemetry(self, api, mqtt_client):
        api.post("/api/automations", json=self.RULE)

        api.app.state.receiver.dispatcher.handle(f"{NAMESPACE}/dev1/data", b'{"temperature": 31.5}')

        mqtt_client.publish.assert_called_once_with(f"{NAMESPACE}/dev1/command", "FAN_ON", qos=1)


# =============================================================================
# STATS
# =============================================================================

class TestStatsAPI:

    def test_stats(self, api):
        api.post("/api/devices", json={"device_id": "dev1", "name": "A"})
        api.post("/api/devices", json={"device_id": "dev2", "name": "B"})
        api.post("/api/automations", json=TestAutomationsAPI.RULE)
        api.app.state.receiver.ingestion.ingest_telemetry("dev1", {"temperature": 20})

        assert api.get("/api/stats").json() == {
            "total_devices": 2,
            "online_devices": 1,
            "total_readings": 1,
            "active_automations": 1,
        }
