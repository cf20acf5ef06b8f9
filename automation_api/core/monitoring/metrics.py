"""Métricas Prometheus del pipeline MQTT.

Registradas en el registry global de prometheus_client; se exponen en
GET /metrics.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

MQTT_MESSAGES_RECEIVED = Counter(
    "automation_mqtt_messages_received_total",
    "Total MQTT messages received",
    ["variant"],  # telemetry, status, ignored, malformed, failed
)

MQTT_PROCESSING_LATENCY = Histogram(
    "automation_mqtt_processing_seconds",
    "MQTT message processing latency",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

MQTT_RECEIVER_CONNECTED = Gauge(
    "automation_mqtt_receiver_connected",
    "MQTT receiver connection status",
)

READINGS_STORED = Counter(
    "automation_readings_stored_total",
    "Sensor readings persisted",
    ["sensor_type"],
)

COMMANDS_PUBLISHED = Counter(
    "automation_commands_published_total",
    "Outbound device commands",
    ["result"],  # sent, failed
)
