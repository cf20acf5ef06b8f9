"""Topics MQTT: <namespace>/<device_id>/<kind>."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

KIND_DATA = "data"
KIND_STATUS = "status"
KIND_COMMAND = "command"


@dataclass(frozen=True)
class TopicParts:
    namespace: str
    device_id: str
    kind: str


def split_topic(topic: str, namespace: str) -> Optional[TopicParts]:
    """Descompone el topic. None si no tiene la forma esperada.

    El kind no se valida aquí: un kind desconocido es un topic bien formado.
    """
    parts = topic.split("/")
    if len(parts) != 3:
        return None

    ns, device_id, kind = parts
    if ns != namespace or not device_id or not kind:
        return None

    return TopicParts(namespace=ns, device_id=device_id, kind=kind)


def subscription_topics(namespace: str) -> list[str]:
    """Topics a los que se suscribe el receptor."""
    return [
        f"{namespace}/+/{KIND_DATA}",
        f"{namespace}/+/{KIND_STATUS}",
    ]


def command_topic(namespace: str, device_id: str) -> str:
    return f"{namespace}/{device_id}/{KIND_COMMAND}"
