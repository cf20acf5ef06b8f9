"""Eventos transitorios del pipeline.

Mensajes entrantes (resultado de clasificar topic + payload):
- TelemetryMessage  → <ns>/<device_id>/data
- StatusMessage     → <ns>/<device_id>/status
- IgnoredMessage    → kind desconocido, se descarta sin error
- MalformedMessage  → topic o payload inválido, se descarta con warning

Salida:
- CommandEvent      → acción a publicar en <ns>/<device_id>/command

Ninguno se persiste.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True)
class TelemetryMessage:
    device_id: str
    fields: dict[str, float] = field(default_factory=dict)
    # Claves descartadas por no ser numéricas
    skipped: tuple[str, ...] = ()


@dataclass(frozen=True)
class StatusMessage:
    device_id: str
    status: str


@dataclass(frozen=True)
class IgnoredMessage:
    topic: str
    kind: str


@dataclass(frozen=True)
class MalformedMessage:
    topic: str
    reason: str


InboundMessage = Union[TelemetryMessage, StatusMessage, IgnoredMessage, MalformedMessage]


@dataclass(frozen=True)
class CommandEvent:
    """Comando saliente hacia un dispositivo."""
    device_id: str
    action: str
    # None para comandos manuales (API)
    rule_id: Optional[int] = None
