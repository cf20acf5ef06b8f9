"""Receptor MQTT - ensamblado del pipeline de automatización.

Usa la arquitectura modular:
- transport/     → Cliente MQTT + dispatcher
- pipeline/      → Ingesta, reglas, comandos
- repositories/  → Persistencia SQL
- monitoring/    → Stats y health
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.engine import Engine

from common.config import Settings
from .clock import TimestampClock
from .monitoring.health import HealthChecker
from .pipeline.command_publisher import CommandPublisher
from .pipeline.ingestion import IngestionProcessor
from .pipeline.rule_engine import RuleEngine
from .repositories import DeviceRepository, ReadingRepository, RuleRepository
from .transport.message_handler import MessageDispatcher
from .transport.mqtt_client import MQTTClient
from .transport.topics import subscription_topics

logger = logging.getLogger(__name__)


class AutomationReceiver:
    """Receptor MQTT con el pipeline completo.

    Componentes (todos inyectados por constructor, sin estado global):
    - MQTTClient: conexión, suscripción y publicación
    - MessageDispatcher: clasificación y delegación
    - IngestionProcessor: liveness + lecturas
    - RuleEngine: evaluación de reglas
    - CommandPublisher: comandos salientes
    """

    def __init__(
        self,
        settings: Settings,
        engine: Engine,
        mqtt_client: Optional[MQTTClient] = None,
        clock: Optional[TimestampClock] = None,
    ):
        self._settings = settings
        self._engine = engine
        self._running = False

        namespace = settings.mqtt_topic_base
        self.clock = clock or TimestampClock()

        self._mqtt = mqtt_client or MQTTClient(
            broker_host=settings.mqtt_broker_host,
            broker_port=settings.mqtt_broker_port,
            username=settings.mqtt_username,
            password=settings.mqtt_password,
            client_id=settings.mqtt_client_id,
            subscriptions=subscription_topics(namespace),
            keepalive=settings.mqtt_keepalive,
            reconnect_delay=settings.mqtt_reconnect_delay,
        )

        self.devices = DeviceRepository(engine)
        self.readings = ReadingRepository(engine)
        self.rules = RuleRepository(engine)

        self.publisher = CommandPublisher(self._mqtt, namespace)
        self.rule_engine = RuleEngine(self.rules, self.publisher)
        self.ingestion = IngestionProcessor(
            self.devices,
            self.readings,
            self.rule_engine,
            clock=self.clock,
        )
        self.dispatcher = MessageDispatcher(self.ingestion, namespace)
        self._mqtt.set_message_handler(self.dispatcher.handle)

        self._health = HealthChecker(engine)

    def start(self) -> bool:
        """Arranca el cliente MQTT.

        Con el broker caído queda en estado "connecting": paho reintenta en
        segundo plano y is_connected refleja el estado real.
        """
        if self._running:
            return True

        if not self._mqtt.connect():
            logger.error("[RECEIVER] MQTT connection failed")
            return False

        self._running = True
        logger.info(
            "[RECEIVER] Started namespace=%s broker=%s:%d (%s)",
            self._settings.mqtt_topic_base,
            self._settings.mqtt_broker_host,
            self._settings.mqtt_broker_port,
            "connected" if self.is_connected else "connecting",
        )
        return True

    def stop(self):
        """Detiene el receptor. Los mensajes en vuelo se pierden."""
        self._running = False
        self._mqtt.disconnect()
        logger.info("[RECEIVER] Stopped. %s", self.dispatcher.stats)

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_connected(self) -> bool:
        return self._mqtt.is_connected

    @property
    def stats(self) -> dict:
        """Estadísticas del receptor."""
        return {
            "running": self._running,
            "connected": self.is_connected,
            "namespace": self._settings.mqtt_topic_base,
            "broker": f"{self._settings.mqtt_broker_host}:{self._settings.mqtt_broker_port}",
            "messages": self.dispatcher.stats.to_dict(),
            "commands": self.publisher.stats.to_dict(),
        }

    def health_check(self) -> dict:
        """Health check del receptor."""
        stats = self.dispatcher.stats
        status = self._health.get_status(
            running=self._running,
            mqtt_connected=self.is_connected,
            processed=stats.processed,
            failed=stats.failed + stats.malformed,
        )
        return status.to_dict()
