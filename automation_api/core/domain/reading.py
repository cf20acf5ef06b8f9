"""Modelo de dominio para lecturas de sensores."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional


# Tipos de sensor que se persisten y su unidad fija.
SENSOR_UNITS: dict[str, str] = {
    "temperature": "°C",
    "humidity": "%",
    "pressure": "hPa",
    "light": "lux",
}


def unit_for(sensor_type: str) -> Optional[str]:
    """Unidad del tipo de sensor, None si no es un tipo conocido."""
    return SENSOR_UNITS.get(sensor_type)


@dataclass(frozen=True)
class SensorReading:
    """Lectura persistida - hecho inmutable.

    device_id no se valida contra devices: una lectura puede pertenecer a un
    dispositivo no registrado.
    """
    device_id: str
    sensor_type: str
    value: float
    unit: Optional[str]
    timestamp: datetime
    id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SensorReading":
        return cls(
            id=row.get("id"),
            device_id=str(row["device_id"]),
            sensor_type=str(row["sensor_type"]),
            value=float(row["value"]),
            unit=row.get("unit"),
            timestamp=row["timestamp"],
        )
