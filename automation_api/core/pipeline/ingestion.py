"""Procesador de ingesta: liveness + lecturas + reglas."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

from ..clock import TimestampClock
from ..domain.contracts import DeviceRegistry, ReadingStore
from ..domain.device import DeviceStatus
from ..domain.events import CommandEvent
from ..domain.reading import unit_for
from ..monitoring.metrics import READINGS_STORED
from .rule_engine import RuleEngine

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    """Resumen informativo de una telemetría procesada."""

    device_id: str
    # None si falló la escritura de liveness
    liveness_rows: Optional[int] = None
    readings_stored: int = 0
    readings_failed: int = 0
    commands: list[CommandEvent] = field(default_factory=list)

    @property
    def device_registered(self) -> bool:
        return bool(self.liveness_rows)


class IngestionProcessor:
    """Procesa telemetría y estados de dispositivos.

    Pipeline de telemetría (cada etapa captura sus propios errores):
    1. Liveness: status=online, last_seen=now
    2. Una lectura por cada tipo de sensor conocido
    3. Motor de reglas con TODOS los campos recibidos
    """

    def __init__(
        self,
        devices: DeviceRegistry,
        readings: ReadingStore,
        rule_engine: RuleEngine,
        clock: Optional[TimestampClock] = None,
    ):
        self._devices = devices
        self._readings = readings
        self._rule_engine = rule_engine
        self._clock = clock or TimestampClock()

    def ingest_telemetry(self, device_id: str, fields: Mapping[str, float]) -> IngestionResult:
        now = self._clock.now()
        result = IngestionResult(device_id=device_id)

        # 1. Liveness
        result.liveness_rows = self._update_status(device_id, DeviceStatus.ONLINE, now)

        # 2. Lecturas
        for sensor_type, value in fields.items():
            unit = unit_for(sensor_type)
            if unit is None:
                continue

            try:
                self._readings.append(device_id, sensor_type, value, unit, now)
                result.readings_stored += 1
                READINGS_STORED.labels(sensor_type=sensor_type).inc()
            except Exception as e:
                result.readings_failed += 1
                logger.error(
                    "[INGEST] Failed to store reading device_id=%s %s=%s: %s",
                    device_id, sensor_type, value, e,
                )

        # 3. Reglas (independiente del resultado de las escrituras)
        result.commands = self._rule_engine.evaluate(device_id, fields)

        logger.debug(
            "[INGEST] device_id=%s stored=%d failed=%d commands=%d",
            device_id,
            result.readings_stored,
            result.readings_failed,
            len(result.commands),
        )
        return result

    def ingest_status(self, device_id: str, status: str) -> bool:
        """Asigna el status reportado por el dispositivo.

        Returns:
            True si la escritura no falló (aunque afecte 0 filas)
        """
        return self._update_status(device_id, status, self._clock.now()) is not None

    def _update_status(self, device_id: str, status: str, now) -> Optional[int]:
        try:
            affected = self._devices.upsert_status(device_id, status, now)
        except Exception as e:
            logger.error("[INGEST] Failed to update status device_id=%s: %s", device_id, e)
            return None

        if affected == 0:
            logger.debug("[INGEST] Status for unregistered device_id=%s (0 rows)", device_id)
        return affected
