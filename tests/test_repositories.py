"""Tests de persistencia SQL sobre SQLite en memoria."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from common.schema import ensure_schema


T0 = datetime(2024, 1, 1, 12, 0, 0)


class TestSchema:

    def test_ensure_schema_is_idempotent(self, engine):
        ensure_schema(engine)
        ensure_schema(engine)


# =============================================================================
# DEVICES
# =============================================================================

class TestDeviceRepository:

    def test_register_starts_offline(self, devices):
        device = devices.register("dev1", "Sensor 1", type="esp32", location="lab")

        stored = devices.get("dev1")
        assert device.id is not None
        assert stored.status == "offline"
        assert stored.last_seen is None
        assert stored.type == "esp32"
        assert stored.location == "lab"

    def test_register_duplicate_raises(self, devices):
        devices.register("dev1", "Sensor 1")

        with pytest.raises(IntegrityError):
            devices.register("dev1", "Another")

    def test_upsert_status_does_not_create(self, devices):
        assert devices.upsert_status("ghost", "online", T0) == 0
        assert devices.get("ghost") is None

    def test_upsert_status_updates_existing(self, devices):
        devices.register("dev1", "Sensor 1")

        assert devices.upsert_status("dev1", "online", T0) == 1

        device = devices.get("dev1")
        assert device.is_online
        assert device.last_seen == T0

    def test_update_and_delete(self, devices):
        devices.register("dev1", "Sensor 1")

        assert devices.update("dev1", "Renamed", "esp8266", "kitchen") == 1
        assert devices.get("dev1").name == "Renamed"
        assert devices.update("missing", "x") == 0

        assert devices.delete("dev1") == 1
        assert devices.delete("dev1") == 0

    def test_list_all_newest_first(self, devices):
        devices.register("old", "Old", created_at=T0)
        devices.register("new", "New", created_at=T0 + timedelta(minutes=1))

        assert [d.device_id for d in devices.list_all()] == ["new", "old"]

    def test_count_by_status(self, devices):
        devices.register("dev1", "A")
        devices.register("dev2", "B")
        devices.upsert_status("dev1", "online", T0)

        assert devices.count() == 2
        assert devices.count(status="online") == 1


# =============================================================================
# READINGS
# =============================================================================

class TestReadingRepository:

    def test_list_newest_first_with_limit(self, readings):
        for i in range(5):
            readings.append("dev1", "temperature", 20 + i, "°C", T0 + timedelta(seconds=i))

        result = readings.list_for_device("dev1", limit=3)

        assert [r.value for r in result] == [24.0, 23.0, 22.0]

    def test_same_timestamp_ties_broken_by_insert_order(self, readings):
        readings.append("dev1", "temperature", 1, "°C", T0)
        readings.append("dev1", "temperature", 2, "°C", T0)

        assert readings.list_for_device("dev1")[0].value == 2.0
        assert readings.latest_for_device("dev1")[0].value == 2.0

    def test_latest_per_sensor_type(self, readings):
        readings.append("dev1", "temperature", 20, "°C", T0)
        readings.append("dev1", "temperature", 25, "°C", T0 + timedelta(seconds=10))
        readings.append("dev1", "humidity", 40, "%", T0 + timedelta(seconds=5))
        readings.append("dev2", "temperature", 99, "°C", T0 + timedelta(seconds=20))

        latest = {r.sensor_type: r.value for r in readings.latest_for_device("dev1")}

        assert latest == {"temperature": 25.0, "humidity": 40.0}

    def test_readings_do_not_require_registered_device(self, readings):
        readings.append("ghost", "light", 300, "lux", T0)

        assert readings.count() == 1


# =============================================================================
# RULES
# =============================================================================

class TestRuleRepository:

    def test_create_is_active(self, rules):
        rule = rules.create("Fan", "dev1", "temperature", "greater", 30, "FAN_ON")

        stored = rules.get(rule.id)
        assert stored.active is True
        assert stored.threshold == 30.0
        assert stored.condition == "greater"

    def test_toggle_twice_restores(self, rules):
        rule = rules.create("Fan", "dev1", "temperature", "greater", 30, "FAN_ON")

        assert rules.toggle(rule.id) == 1
        assert rules.get(rule.id).active is False
        assert rules.list_active_for_device("dev1") == []

        rules.toggle(rule.id)
        assert rules.get(rule.id).active is True

    def test_toggle_missing_rule(self, rules):
        assert rules.toggle(12345) == 0

    def test_list_active_for_device_ordered_by_id(self, rules):
        a = rules.create("A", "dev1", "temperature", "greater", 30, "A_ON")
        rules.create("Other", "dev2", "temperature", "greater", 30, "X")
        b = rules.create("B", "dev1", "humidity", "less", 20, "B_ON")

        assert [r.id for r in rules.list_active_for_device("dev1")] == [a.id, b.id]

    def test_delete_and_count_active(self, rules):
        a = rules.create("A", "dev1", "temperature", "greater", 30, "A_ON")
        b = rules.create("B", "dev1", "temperature", "less", 10, "B_ON")
        rules.toggle(b.id)

        assert rules.count_active() == 1
        assert rules.delete(a.id) == 1
        assert rules.count_active() == 0
        assert len(rules.list_all()) == 1
