"""Domain layer - Modelos y contratos."""

from .contracts import CommandTransport, DeviceRegistry, ReadingStore, RuleStore
from .device import Device, DeviceStatus
from .events import (
    CommandEvent,
    IgnoredMessage,
    InboundMessage,
    MalformedMessage,
    StatusMessage,
    TelemetryMessage,
)
from .reading import SENSOR_UNITS, SensorReading, unit_for
from .rule import AutomationRule, RuleCondition, is_known_condition

__all__ = [
    "AutomationRule",
    "CommandEvent",
    "CommandTransport",
    "Device",
    "DeviceRegistry",
    "DeviceStatus",
    "IgnoredMessage",
    "InboundMessage",
    "MalformedMessage",
    "ReadingStore",
    "RuleCondition",
    "RuleStore",
    "SENSOR_UNITS",
    "SensorReading",
    "StatusMessage",
    "TelemetryMessage",
    "is_known_condition",
    "unit_for",
]
