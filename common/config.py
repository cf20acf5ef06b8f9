from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _default_env_file() -> str:
    # .env en el directorio de trabajo del proceso.
    return str(Path.cwd() / ".env")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str

    mqtt_enabled: bool
    mqtt_broker_host: str
    mqtt_broker_port: int
    mqtt_username: str | None
    mqtt_password: str | None
    mqtt_client_id: str
    mqtt_topic_base: str
    mqtt_keepalive: int
    mqtt_reconnect_delay: int

    api_host: str
    api_port: int

    log_level: str


def get_settings() -> Settings:
    # Carga el env file (si existe) sin pisar variables reales del entorno.
    env_file = os.getenv("AUTOMATION_ENV_FILE", _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    database_url = os.getenv("DATABASE_URL", "sqlite:///./database/iot.db")

    mqtt_enabled = _env_bool("MQTT_ENABLED", "true")
    mqtt_broker_host = os.getenv("MQTT_BROKER_HOST", "localhost")
    mqtt_broker_port = int(os.getenv("MQTT_BROKER_PORT", "1883"))
    mqtt_username = os.getenv("MQTT_USERNAME") or None
    mqtt_password = os.getenv("MQTT_PASSWORD") or None
    mqtt_client_id = os.getenv("MQTT_CLIENT_ID", "iot-backend")

    # Namespace fijo de los topics: <base>/<device_id>/<kind>
    mqtt_topic_base = os.getenv("MQTT_TOPIC_BASE", "iot-funcionando").strip("/")
    if not mqtt_topic_base or any(c in mqtt_topic_base for c in "/+#"):
        raise ValueError(
            f"MQTT_TOPIC_BASE must be a single topic segment without '/', '+' or '#', got {mqtt_topic_base!r}"
        )
    mqtt_keepalive = int(os.getenv("MQTT_KEEPALIVE", "60"))
    mqtt_reconnect_delay = int(os.getenv("MQTT_RECONNECT_DELAY", "1"))

    api_host = os.getenv("API_HOST", "0.0.0.0")
    api_port = int(os.getenv("API_PORT", os.getenv("PORT", "3000")))

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    return Settings(
        database_url=database_url,
        mqtt_enabled=mqtt_enabled,
        mqtt_broker_host=mqtt_broker_host,
        mqtt_broker_port=mqtt_broker_port,
        mqtt_username=mqtt_username,
        mqtt_password=mqtt_password,
        mqtt_client_id=mqtt_client_id,
        mqtt_topic_base=mqtt_topic_base,
        mqtt_keepalive=mqtt_keepalive,
        mqtt_reconnect_delay=mqtt_reconnect_delay,
        api_host=api_host,
        api_port=api_port,
        log_level=log_level,
    )
