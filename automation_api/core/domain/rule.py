"""Reglas de automatización: condición + umbral + acción."""

from __future__ import annotations

import operator
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Mapping, Optional


class RuleCondition(str, Enum):
    GREATER = "greater"
    LESS = "less"
    EQUAL = "equal"


# Comparación exacta: "equal" no usa tolerancia.
_COMPARATORS: dict[str, Callable[[float, float], bool]] = {
    RuleCondition.GREATER.value: operator.gt,
    RuleCondition.LESS.value: operator.lt,
    RuleCondition.EQUAL.value: operator.eq,
}


def is_known_condition(condition: str) -> bool:
    return condition in _COMPARATORS


@dataclass(frozen=True)
class AutomationRule:
    """Regla ligada a un único dispositivo y un único tipo de sensor.

    condition se guarda como string tal cual viene de la BD; una condición
    desconocida nunca dispara.
    """
    id: int
    name: str
    device_id: str
    sensor_type: str
    condition: str
    threshold: float
    action: str
    active: bool = True
    created_at: Optional[datetime] = None

    def is_triggered_by(self, value: float) -> bool:
        """Evalúa la condición contra el valor recibido.

        greater/less son desigualdades estrictas; equal es igualdad exacta.
        """
        comparator = _COMPARATORS.get(self.condition)
        if comparator is None:
            return False
        return comparator(value, self.threshold)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AutomationRule":
        return cls(
            id=int(row["id"]),
            name=str(row["name"]),
            device_id=str(row["device_id"]),
            sensor_type=str(row["sensor_type"]),
            condition=str(row["condition"]),
            threshold=float(row["threshold"]),
            action=str(row["action"]),
            active=bool(row["active"]),
            created_at=row.get("created_at"),
        )
