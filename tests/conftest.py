"""Fixtures compartidas de los tests."""

from __future__ import annotations

from dataclasses import replace
from unittest.mock import MagicMock

import pytest

from common.config import Settings
from common.db import create_db_engine
from common.schema import ensure_schema
from automation_api.core.clock import TimestampClock
from automation_api.core.domain.contracts import CommandTransport
from automation_api.core.pipeline import CommandPublisher, IngestionProcessor, RuleEngine
from automation_api.core.repositories import DeviceRepository, ReadingRepository, RuleRepository
from automation_api.core.transport.message_handler import MessageDispatcher


NAMESPACE = "iot-funcionando"


BASE_SETTINGS = Settings(
    database_url="sqlite://",
    mqtt_enabled=True,
    mqtt_broker_host="localhost",
    mqtt_broker_port=1883,
    mqtt_username=None,
    mqtt_password=None,
    mqtt_client_id="test-backend",
    mqtt_topic_base=NAMESPACE,
    mqtt_keepalive=60,
    mqtt_reconnect_delay=1,
    api_host="127.0.0.1",
    api_port=3000,
    log_level="DEBUG",
)


@pytest.fixture
def settings() -> Settings:
    return replace(BASE_SETTINGS)


@pytest.fixture
def engine():
    """SQLite en memoria con el esquema creado."""
    engine = create_db_engine("sqlite://")
    ensure_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def devices(engine) -> DeviceRepository:
    return DeviceRepository(engine)


@pytest.fixture
def readings(engine) -> ReadingRepository:
    return ReadingRepository(engine)


@pytest.fixture
def rules(engine) -> RuleRepository:
    return RuleRepository(engine)


@pytest.fixture
def transport():
    """Mock del transporte MQTT saliente."""
    transport = MagicMock(spec=CommandTransport)
    transport.publish = MagicMock(return_value=True)
    transport.is_connected = True
    return transport


@pytest.fixture
def publisher(transport) -> CommandPublisher:
    return CommandPublisher(transport, NAMESPACE)


@pytest.fixture
def rule_engine(rules, publisher) -> RuleEngine:
    return RuleEngine(rules, publisher)


@pytest.fixture
def processor(devices, readings, rule_engine) -> IngestionProcessor:
    return IngestionProcessor(devices, readings, rule_engine, clock=TimestampClock())


@pytest.fixture
def dispatcher(processor) -> MessageDispatcher:
    return MessageDispatcher(processor, NAMESPACE)
