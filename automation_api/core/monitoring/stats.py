"""Estadísticas de procesamiento."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime

from ..clock import utc_now


@dataclass
class DispatcherStats:
    """Contadores de mensajes entrantes por variante."""

    received: int = 0
    telemetry: int = 0
    status: int = 0
    ignored: int = 0
    malformed: int = 0
    failed: int = 0
    last_message_at: float = 0
    started_at: datetime = field(default_factory=utc_now)

    def __str__(self) -> str:
        return (
            f"Stats: received={self.received} telemetry={self.telemetry} "
            f"status={self.status} ignored={self.ignored} "
            f"malformed={self.malformed} failed={self.failed}"
        )

    @property
    def processed(self) -> int:
        return self.telemetry + self.status

    def to_dict(self) -> dict:
        """Convierte a diccionario."""
        return {
            "received": self.received,
            "telemetry": self.telemetry,
            "status": self.status,
            "ignored": self.ignored,
            "malformed": self.malformed,
            "failed": self.failed,
            "last_message_at": self.last_message_at,
            "started_at": self.started_at.isoformat(),
        }


class PublisherStats:
    """Comandos publicados / fallidos. Se actualiza desde paho y desde la API."""

    def __init__(self):
        self._lock = threading.Lock()
        self.published = 0
        self.failed = 0

    def record(self, ok: bool):
        with self._lock:
            if ok:
                self.published += 1
            else:
                self.failed += 1

    def to_dict(self) -> dict:
        return {"published": self.published, "failed": self.failed}
