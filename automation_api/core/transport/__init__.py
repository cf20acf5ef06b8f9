"""Transport layer - Recepción MQTT y clasificación de mensajes.

MessageDispatcher vive en transport.message_handler y se importa desde ahí
(depende de pipeline, que a su vez usa transport.topics).
"""

from .mqtt_client import MQTTClient
from .payloads import ValidationResult, parse_message, validate_telemetry
from .topics import command_topic, split_topic, subscription_topics

__all__ = [
    "MQTTClient",
    "ValidationResult",
    "command_topic",
    "parse_message",
    "split_topic",
    "subscription_topics",
    "validate_telemetry",
]
