"""Clasificación y validación de mensajes entrantes.

Convierte (topic, payload) en una variante de InboundMessage. Nunca lanza:
cualquier error de decodificación termina en MalformedMessage.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional

import orjson

from ..domain.events import (
    IgnoredMessage,
    InboundMessage,
    MalformedMessage,
    StatusMessage,
    TelemetryMessage,
)
from .topics import KIND_DATA, KIND_STATUS, split_topic


@dataclass
class ValidationResult:
    """Resultado de validación de un payload de telemetría."""

    valid: bool
    fields: dict[str, float] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)
    error: Optional[str] = None


def _is_number(value: Any) -> bool:
    # bool es subclase de int: true/false no son lecturas
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def validate_telemetry(data: Any) -> ValidationResult:
    """Valida el documento JSON de telemetría.

    Formato esperado: {"temperature": 23.5, "humidity": 55, ...}

    Los miembros no numéricos (o NaN/inf) se descartan individualmente;
    un documento que no es objeto invalida el mensaje completo.
    """
    if not isinstance(data, dict):
        return ValidationResult(
            valid=False,
            error=f"payload must be a JSON object, got {type(data).__name__}",
        )

    fields: dict[str, float] = {}
    skipped: list[str] = []
    for key, value in data.items():
        if _is_number(value):
            fields[str(key)] = value
        else:
            skipped.append(str(key))

    return ValidationResult(valid=True, fields=fields, skipped=skipped)


def parse_message(topic: str, payload: bytes, namespace: str) -> InboundMessage:
    """Clasifica un mensaje MQTT por la forma del topic."""
    parts = split_topic(topic, namespace)
    if parts is None:
        return MalformedMessage(topic=topic, reason="unexpected topic shape")

    if parts.kind == KIND_DATA:
        return _parse_telemetry(topic, parts.device_id, payload)

    if parts.kind == KIND_STATUS:
        try:
            status = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            return MalformedMessage(topic=topic, reason=f"invalid UTF-8: {e}")
        return StatusMessage(device_id=parts.device_id, status=status)

    return IgnoredMessage(topic=topic, kind=parts.kind)


def _parse_telemetry(topic: str, device_id: str, payload: bytes) -> InboundMessage:
    try:
        # orjson rechaza UTF-8 inválido y NaN/Infinity
        data = orjson.loads(payload)
    except orjson.JSONDecodeError as e:
        return MalformedMessage(topic=topic, reason=f"invalid JSON: {e}")

    validation = validate_telemetry(data)
    if not validation.valid:
        return MalformedMessage(topic=topic, reason=validation.error or "invalid payload")

    return TelemetryMessage(
        device_id=device_id,
        fields=validation.fields,
        skipped=tuple(validation.skipped),
    )
