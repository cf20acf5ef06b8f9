"""Repositorio de reglas de automatización."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.engine import Engine

from ..clock import utc_now
from ..domain.contracts import RuleStore
from ..domain.rule import AutomationRule

logger = logging.getLogger(__name__)

_RULE_COLUMNS = (
    "id, name, device_id, sensor_type, condition, threshold, action, active, created_at"
)


class RuleRepository(RuleStore):
    """Acceso a la tabla automations."""

    def __init__(self, engine: Engine):
        self._engine = engine

    def list_active_for_device(self, device_id: str) -> list[AutomationRule]:
        stmt = text(
            f"""
            SELECT {_RULE_COLUMNS}
            FROM automations
            WHERE device_id = :device_id AND active = 1
            ORDER BY id ASC
            """
        ).columns(created_at=DateTime())

        with self._engine.connect() as conn:
            rows = conn.execute(stmt, {"device_id": device_id}).mappings().all()
        return [AutomationRule.from_row(r) for r in rows]

    def list_all(self) -> list[AutomationRule]:
        stmt = text(
            f"SELECT {_RULE_COLUMNS} FROM automations ORDER BY created_at DESC, id DESC"
        ).columns(created_at=DateTime())

        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [AutomationRule.from_row(r) for r in rows]

    def get(self, rule_id: int) -> Optional[AutomationRule]:
        stmt = text(
            f"SELECT {_RULE_COLUMNS} FROM automations WHERE id = :id"
        ).columns(created_at=DateTime())

        with self._engine.connect() as conn:
            row = conn.execute(stmt, {"id": rule_id}).mappings().first()
        return AutomationRule.from_row(row) if row else None

    def create(
        self,
        name: str,
        device_id: str,
        sensor_type: str,
        condition: str,
        threshold: float,
        action: str,
        created_at: Optional[datetime] = None,
    ) -> AutomationRule:
        """Crea una regla activa."""
        created_at = created_at or utc_now()
        stmt = text(
            """
            INSERT INTO automations (
                name, device_id, sensor_type, condition, threshold, action, active, created_at
            )
            VALUES (
                :name, :device_id, :sensor_type, :condition, :threshold, :action, 1, :created_at
            )
            """
        ).bindparams(bindparam("created_at", type_=DateTime()))

        with self._engine.begin() as conn:
            result = conn.execute(
                stmt,
                {
                    "name": name,
                    "device_id": device_id,
                    "sensor_type": sensor_type,
                    "condition": condition,
                    "threshold": float(threshold),
                    "action": action,
                    "created_at": created_at,
                },
            )
            new_id = result.lastrowid

        logger.info(
            "[DB] Rule created id=%s device_id=%s %s %s %s -> %s",
            new_id, device_id, sensor_type, condition, threshold, action,
        )
        return AutomationRule(
            id=int(new_id),
            name=name,
            device_id=device_id,
            sensor_type=sensor_type,
            condition=condition,
            threshold=float(threshold),
            action=action,
            active=True,
            created_at=created_at,
        )

    def toggle(self, rule_id: int) -> int:
        """Invierte el flag active. Retorna filas afectadas."""
        with self._engine.begin() as conn:
            result = conn.execute(
                text(
                    """
                    UPDATE automations
                    SET active = CASE WHEN active = 1 THEN 0 ELSE 1 END
                    WHERE id = :id
                    """
                ),
                {"id": rule_id},
            )
            affected = result.rowcount
        return affected

    def delete(self, rule_id: int) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(
                text("DELETE FROM automations WHERE id = :id"),
                {"id": rule_id},
            )
            affected = result.rowcount
        return affected

    def count_active(self) -> int:
        with self._engine.connect() as conn:
            return int(
                conn.execute(text("SELECT COUNT(*) FROM automations WHERE active = 1")).scalar_one()
            )
