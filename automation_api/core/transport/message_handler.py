"""Dispatcher de mensajes MQTT."""

from __future__ import annotations

import logging
import time

from ..domain.events import (
    IgnoredMessage,
    MalformedMessage,
    StatusMessage,
    TelemetryMessage,
)
from ..monitoring.metrics import MQTT_MESSAGES_RECEIVED, MQTT_PROCESSING_LATENCY
from ..monitoring.stats import DispatcherStats
from ..pipeline.ingestion import IngestionProcessor
from .payloads import parse_message

logger = logging.getLogger(__name__)


class MessageDispatcher:
    """Clasifica mensajes MQTT y los delega al procesador de ingesta.

    Responsabilidades:
    - Clasificación topic + payload → variante de mensaje
    - Descarte de mensajes malformados o de kind desconocido
    - Tracking de estadísticas

    Ningún error sale de handle(): un mensaje roto de un dispositivo no
    afecta a los siguientes.
    """

    def __init__(self, processor: IngestionProcessor, namespace: str):
        self._processor = processor
        self._namespace = namespace
        self._stats = DispatcherStats()

    def handle(self, topic: str, payload: bytes):
        """Procesa un mensaje MQTT."""
        self._stats.received += 1
        self._stats.last_message_at = time.time()
        start = time.perf_counter()

        try:
            message = parse_message(topic, payload, self._namespace)

            if isinstance(message, TelemetryMessage):
                if message.skipped:
                    logger.warning(
                        "[DISPATCHER] Non-numeric fields dropped %s (topic=%s)",
                        list(message.skipped),
                        topic,
                    )
                self._stats.telemetry += 1
                variant = "telemetry"
                self._processor.ingest_telemetry(message.device_id, message.fields)

            elif isinstance(message, StatusMessage):
                self._stats.status += 1
                variant = "status"
                self._processor.ingest_status(message.device_id, message.status)

            elif isinstance(message, IgnoredMessage):
                self._stats.ignored += 1
                variant = "ignored"
                logger.debug("[DISPATCHER] Ignored kind=%s (topic=%s)", message.kind, topic)

            elif isinstance(message, MalformedMessage):
                self._stats.malformed += 1
                variant = "malformed"
                logger.warning("[DISPATCHER] Dropped: %s (topic=%s)", message.reason, topic)

            else:
                raise TypeError(f"unhandled message variant {type(message).__name__}")

            # Log periódico
            if self._stats.received % 100 == 0:
                logger.info("[DISPATCHER] %s", self._stats)

        except Exception as e:
            logger.exception("[DISPATCHER] Error processing topic=%s: %s", topic, e)
            self._stats.failed += 1
            variant = "failed"

        MQTT_MESSAGES_RECEIVED.labels(variant=variant).inc()
        MQTT_PROCESSING_LATENCY.observe(time.perf_counter() - start)

    @property
    def stats(self) -> DispatcherStats:
        return self._stats
