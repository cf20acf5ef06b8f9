"""Motor de reglas de automatización."""

from __future__ import annotations

import logging
from typing import Mapping

from ..domain.contracts import RuleStore
from ..domain.events import CommandEvent
from ..domain.rule import is_known_condition
from .command_publisher import CommandPublisher

logger = logging.getLogger(__name__)


class RuleEngine:
    """Evalúa las reglas activas de un dispositivo contra una telemetría.

    - Cada regla se evalúa de forma independiente: pueden dispararse varias
      con el mismo evento.
    - Una regla cuyo sensor_type no viene en fields se salta.
    - Un comando cuenta como disparado aunque la publicación falle.
    """

    def __init__(self, rules: RuleStore, publisher: CommandPublisher):
        self._rules = rules
        self._publisher = publisher

    def evaluate(self, device_id: str, fields: Mapping[str, float]) -> list[CommandEvent]:
        """Evalúa y publica.

        Returns:
            Comandos disparados (vacío si falla la lectura de reglas)
        """
        try:
            rules = self._rules.list_active_for_device(device_id)
        except Exception as e:
            logger.error("[RULES] Failed to load rules for device_id=%s: %s", device_id, e)
            return []

        fired: list[CommandEvent] = []
        for rule in rules:
            if not rule.active:
                continue

            if rule.sensor_type not in fields:
                continue

            if not is_known_condition(rule.condition):
                logger.warning(
                    "[RULES] Unknown condition %r in rule id=%d, skipped",
                    rule.condition,
                    rule.id,
                )
                continue

            value = fields[rule.sensor_type]
            if not rule.is_triggered_by(value):
                continue

            logger.info(
                "[RULES] Rule '%s' (id=%d) fired for device_id=%s: %s=%s %s %s",
                rule.name, rule.id, device_id, rule.sensor_type, value,
                rule.condition, rule.threshold,
            )
            command = CommandEvent(device_id=device_id, action=rule.action, rule_id=rule.id)
            self._publisher.publish(command)
            fired.append(command)

        return fired
