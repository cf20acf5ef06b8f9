"""Repositorio de lecturas - append-only."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.engine import Engine

from ..domain.contracts import ReadingStore
from ..domain.reading import SensorReading


class ReadingRepository(ReadingStore):
    """Acceso a la tabla sensor_data."""

    def __init__(self, engine: Engine):
        self._engine = engine

    def append(
        self,
        device_id: str,
        sensor_type: str,
        value: float,
        unit: str | None,
        timestamp: datetime,
    ) -> None:
        stmt = text(
            """
            INSERT INTO sensor_data (device_id, sensor_type, value, unit, timestamp)
            VALUES (:device_id, :sensor_type, :value, :unit, :ts)
            """
        ).bindparams(bindparam("ts", type_=DateTime()))

        with self._engine.begin() as conn:
            conn.execute(
                stmt,
                {
                    "device_id": device_id,
                    "sensor_type": sensor_type,
                    "value": float(value),
                    "unit": unit,
                    "ts": timestamp,
                },
            )

    def list_for_device(self, device_id: str, limit: int = 100) -> list[SensorReading]:
        """Lecturas del dispositivo, más recientes primero."""
        stmt = text(
            """
            SELECT id, device_id, sensor_type, value, unit, timestamp
            FROM sensor_data
            WHERE device_id = :device_id
            ORDER BY timestamp DESC, id DESC
            LIMIT :limit
            """
        ).columns(timestamp=DateTime())

        with self._engine.connect() as conn:
            rows = conn.execute(stmt, {"device_id": device_id, "limit": int(limit)}).mappings().all()
        return [SensorReading.from_row(r) for r in rows]

    def latest_for_device(self, device_id: str) -> list[SensorReading]:
        """Última lectura por sensor_type (máximo timestamp; empate → último insert)."""
        stmt = text(
            """
            SELECT r.id, r.device_id, r.sensor_type, r.value, r.unit, r.timestamp
            FROM sensor_data r
            WHERE r.device_id = :device_id
              AND r.id = (
                  SELECT s.id FROM sensor_data s
                  WHERE s.device_id = r.device_id
                    AND s.sensor_type = r.sensor_type
                  ORDER BY s.timestamp DESC, s.id DESC
                  LIMIT 1
              )
            ORDER BY r.sensor_type
            """
        ).columns(timestamp=DateTime())

        with self._engine.connect() as conn:
            rows = conn.execute(stmt, {"device_id": device_id}).mappings().all()
        return [SensorReading.from_row(r) for r in rows]

    def count(self) -> int:
        with self._engine.connect() as conn:
            return int(conn.execute(text("SELECT COUNT(*) FROM sensor_data")).scalar_one())
