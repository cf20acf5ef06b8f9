"""Modelo de dominio para dispositivos."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional


class DeviceStatus:
    """Estados conocidos. El transporte puede reportar cualquier otro string."""
    ONLINE = "online"
    OFFLINE = "offline"


@dataclass(frozen=True)
class Device:
    device_id: str
    name: str
    type: Optional[str] = None
    location: Optional[str] = None
    status: str = DeviceStatus.OFFLINE
    last_seen: Optional[datetime] = None
    created_at: Optional[datetime] = None
    id: Optional[int] = None

    @property
    def is_online(self) -> bool:
        return self.status == DeviceStatus.ONLINE

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Device":
        return cls(
            id=row.get("id"),
            device_id=str(row["device_id"]),
            name=str(row["name"]),
            type=row.get("type"),
            location=row.get("location"),
            status=row.get("status") or DeviceStatus.OFFLINE,
            last_seen=row.get("last_seen"),
            created_at=row.get("created_at"),
        )
