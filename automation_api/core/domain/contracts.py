"""Interfaces de los colaboradores del pipeline.

Desacoplan el pipeline de SQLAlchemy y de paho: cualquier implementación
(SQL, en memoria, mock) puede inyectarse por constructor.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Sequence

from .rule import AutomationRule


class DeviceRegistry(ABC):

    @abstractmethod
    def upsert_status(self, device_id: str, status: str, timestamp: datetime) -> int:
        """Actualiza status y last_seen.

        Returns:
            Filas afectadas. 0 si el dispositivo no está registrado (no es error).
        """


class ReadingStore(ABC):

    @abstractmethod
    def append(
        self,
        device_id: str,
        sensor_type: str,
        value: float,
        unit: str | None,
        timestamp: datetime,
    ) -> None:
        """Agrega una lectura."""


class RuleStore(ABC):

    @abstractmethod
    def list_active_for_device(self, device_id: str) -> Sequence[AutomationRule]:
        """Reglas activas del dispositivo."""


class CommandTransport(ABC):
    """Transporte saliente (MQTT)."""

    @abstractmethod
    def publish(self, topic: str, payload: str, qos: int = 1) -> bool:
        """Publica un mensaje.

        Returns:
            True si el cliente aceptó el mensaje, False en caso contrario
        """

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Estado de la conexión."""
