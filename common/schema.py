"""Esquema relacional (SQLite).

Tablas:
- devices:      registro de dispositivos y su estado de vida
- sensor_data:  lecturas append-only
- automations:  reglas de automatización

Las sentencias son idempotentes (IF NOT EXISTS): ensure_schema() se puede
llamar en cada arranque.
"""

from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS devices (
      id INTEGER PRIMARY KEY AUTOINCREMENT,
      device_id TEXT UNIQUE NOT NULL,
      name TEXT NOT NULL,
      type TEXT,
      location TEXT,
      status TEXT NOT NULL DEFAULT 'offline',
      last_seen DATETIME,
      created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    # Sin FK a devices: una lectura puede referenciar un dispositivo no registrado.
    """
    CREATE TABLE IF NOT EXISTS sensor_data (
      id INTEGER PRIMARY KEY AUTOINCREMENT,
      device_id TEXT NOT NULL,
      sensor_type TEXT NOT NULL,
      value REAL NOT NULL,
      unit TEXT,
      timestamp DATETIME NOT NULL
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS ix_sensor_data_device_type_ts
      ON sensor_data (device_id, sensor_type, timestamp)
    """,
    """
    CREATE TABLE IF NOT EXISTS automations (
      id INTEGER PRIMARY KEY AUTOINCREMENT,
      name TEXT NOT NULL,
      device_id TEXT NOT NULL,
      sensor_type TEXT NOT NULL,
      condition TEXT NOT NULL,
      threshold REAL NOT NULL,
      action TEXT NOT NULL,
      active INTEGER NOT NULL DEFAULT 1,
      created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS ix_automations_device_active
      ON automations (device_id, active)
    """,
)


def ensure_schema(engine: Engine) -> None:
    """Crea tablas e índices si no existen."""
    logger.info("[DB] Ensuring schema exists")

    try:
        with engine.begin() as conn:
            for statement in SCHEMA_STATEMENTS:
                conn.execute(text(statement))

        logger.info("[DB] Schema ready (%d statements)", len(SCHEMA_STATEMENTS))

    except Exception as e:
        logger.exception("[DB] Schema creation failed: %s", e)
        raise
