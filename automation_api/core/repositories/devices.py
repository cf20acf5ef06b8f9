"""Repositorio de dispositivos - registro y estado de vida."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.engine import Engine

from ..clock import utc_now
from ..domain.contracts import DeviceRegistry
from ..domain.device import Device, DeviceStatus

logger = logging.getLogger(__name__)

_DEVICE_COLUMNS = "id, device_id, name, type, location, status, last_seen, created_at"


class DeviceRepository(DeviceRegistry):
    """Acceso a la tabla devices.

    El pipeline solo usa upsert_status(); el resto lo usa la API.
    """

    def __init__(self, engine: Engine):
        self._engine = engine

    def upsert_status(self, device_id: str, status: str, timestamp: datetime) -> int:
        """Actualiza status y last_seen de un dispositivo existente.

        No crea el dispositivo: si no está registrado afecta 0 filas.
        """
        stmt = text(
            """
            UPDATE devices
            SET status = :status, last_seen = :ts
            WHERE device_id = :device_id
            """
        ).bindparams(bindparam("ts", type_=DateTime()))

        with self._engine.begin() as conn:
            result = conn.execute(
                stmt,
                {"status": status, "ts": timestamp, "device_id": device_id},
            )
            affected = result.rowcount
        return affected

    def register(
        self,
        device_id: str,
        name: str,
        type: Optional[str] = None,
        location: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> Device:
        """Registra un dispositivo nuevo (status offline).

        Raises:
            IntegrityError si device_id ya existe
        """
        created_at = created_at or utc_now()
        stmt = text(
            """
            INSERT INTO devices (device_id, name, type, location, status, created_at)
            VALUES (:device_id, :name, :type, :location, :status, :created_at)
            """
        ).bindparams(bindparam("created_at", type_=DateTime()))

        with self._engine.begin() as conn:
            result = conn.execute(
                stmt,
                {
                    "device_id": device_id,
                    "name": name,
                    "type": type,
                    "location": location,
                    "status": DeviceStatus.OFFLINE,
                    "created_at": created_at,
                },
            )
            new_id = result.lastrowid

        logger.info("[DB] Device registered device_id=%s id=%s", device_id, new_id)
        return Device(
            id=new_id,
            device_id=device_id,
            name=name,
            type=type,
            location=location,
            status=DeviceStatus.OFFLINE,
            created_at=created_at,
        )

    def get(self, device_id: str) -> Optional[Device]:
        stmt = text(
            f"SELECT {_DEVICE_COLUMNS} FROM devices WHERE device_id = :device_id"
        ).columns(last_seen=DateTime(), created_at=DateTime())

        with self._engine.connect() as conn:
            row = conn.execute(stmt, {"device_id": device_id}).mappings().first()
        return Device.from_row(row) if row else None

    def list_all(self) -> list[Device]:
        stmt = text(
            f"SELECT {_DEVICE_COLUMNS} FROM devices ORDER BY created_at DESC, id DESC"
        ).columns(last_seen=DateTime(), created_at=DateTime())

        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [Device.from_row(r) for r in rows]

    def update(
        self,
        device_id: str,
        name: str,
        type: Optional[str] = None,
        location: Optional[str] = None,
    ) -> int:
        """Actualiza los datos descriptivos. Retorna filas afectadas."""
        with self._engine.begin() as conn:
            result = conn.execute(
                text(
                    """
                    UPDATE devices
                    SET name = :name, type = :type, location = :location
                    WHERE device_id = :device_id
                    """
                ),
                {"name": name, "type": type, "location": location, "device_id": device_id},
            )
            affected = result.rowcount
        return affected

    def delete(self, device_id: str) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(
                text("DELETE FROM devices WHERE device_id = :device_id"),
                {"device_id": device_id},
            )
            affected = result.rowcount
        return affected

    def count(self, status: Optional[str] = None) -> int:
        """Cuenta dispositivos, opcionalmente filtrando por status."""
        if status is None:
            query, params = "SELECT COUNT(*) FROM devices", {}
        else:
            query, params = "SELECT COUNT(*) FROM devices WHERE status = :status", {"status": status}

        with self._engine.connect() as conn:
            return int(conn.execute(text(query), params).scalar_one())
