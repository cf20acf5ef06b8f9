"""Health checks del sistema."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy import text


@dataclass
class HealthStatus:
    """Estado de salud del receptor."""
    healthy: bool
    running: bool
    mqtt_connected: bool
    db_connected: bool
    messages_processed: int
    messages_failed: int

    def to_dict(self) -> dict:
        return {
            "healthy": self.healthy,
            "running": self.running,
            "mqtt_connected": self.mqtt_connected,
            "db_connected": self.db_connected,
            "messages_processed": self.messages_processed,
            "messages_failed": self.messages_failed,
        }


class HealthChecker:
    """Verifica el estado de salud del sistema."""

    def __init__(self, engine: Optional[Engine] = None):
        self._engine = engine

    def check_database(self) -> bool:
        """Verifica conexión a BD."""
        if not self._engine:
            return False

        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            return False

    def get_status(
        self,
        running: bool,
        mqtt_connected: bool,
        processed: int,
        failed: int,
    ) -> HealthStatus:
        """Obtiene estado de salud completo."""
        db_ok = self.check_database()

        return HealthStatus(
            healthy=running and mqtt_connected and db_ok,
            running=running,
            mqtt_connected=mqtt_connected,
            db_connected=db_ok,
            messages_processed=processed,
            messages_failed=failed,
        )
