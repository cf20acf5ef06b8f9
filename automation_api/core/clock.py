"""Reloj de timestamps de escritura."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """UTC naive: SQLite guarda DATETIME sin zona."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampClock:
    """Timestamps no decrecientes dentro del proceso.

    Si el reloj del sistema retrocede (NTP), repite el último valor emitido.
    Compartido entre el hilo de paho y la API, por eso el lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._last: Optional[datetime] = None

    def now(self) -> datetime:
        with self._lock:
            current = utc_now()
            if self._last is not None and current < self._last:
                current = self._last
            self._last = current
            return current
