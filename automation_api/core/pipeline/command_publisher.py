"""Publicador de comandos salientes."""

from __future__ import annotations

import logging

from ..domain.contracts import CommandTransport
from ..domain.events import CommandEvent
from ..monitoring.metrics import COMMANDS_PUBLISHED
from ..monitoring.stats import PublisherStats
from ..transport.topics import command_topic

logger = logging.getLogger(__name__)

COMMAND_QOS = 1


class CommandPublisher:
    """Publica comandos en <namespace>/<device_id>/command.

    Fire-and-forget: un fallo se loguea y se reporta en el retorno, sin
    reintentos (la reconexión es cosa del cliente MQTT).
    """

    def __init__(self, transport: CommandTransport, namespace: str):
        self._transport = transport
        self._namespace = namespace
        self._stats = PublisherStats()

    def topic_for(self, device_id: str) -> str:
        return command_topic(self._namespace, device_id)

    def publish(self, command: CommandEvent) -> bool:
        topic = self.topic_for(command.device_id)

        try:
            ok = self._transport.publish(topic, command.action, qos=COMMAND_QOS)
        except Exception as e:
            logger.error("[COMMAND] Publish failed topic=%s: %s", topic, e)
            ok = False

        self._stats.record(ok)
        COMMANDS_PUBLISHED.labels(result="sent" if ok else "failed").inc()
        if ok:
            logger.info("[COMMAND] Sent %r to %s (rule_id=%s)", command.action, topic, command.rule_id)
        else:
            logger.warning("[COMMAND] Not delivered %r to %s (rule_id=%s)", command.action, topic, command.rule_id)
        return ok

    @property
    def stats(self) -> PublisherStats:
        return self._stats
