"""Cliente MQTT para recepción de telemetría y envío de comandos."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, Sequence

import paho.mqtt.client as mqtt

from ..domain.contracts import CommandTransport
from ..monitoring.metrics import MQTT_RECEIVER_CONNECTED

logger = logging.getLogger(__name__)

MessageCallback = Callable[[str, bytes], None]


class MQTTClient(CommandTransport):
    """Cliente MQTT ligero sobre paho.

    Responsabilidades:
    - Conexión/desconexión a broker MQTT (reconexión automática de paho)
    - Suscripción a topics (se repite en cada reconexión)
    - Delegación de mensajes a handler
    - Publicación de comandos
    """

    def __init__(
        self,
        broker_host: str = "localhost",
        broker_port: int = 1883,
        username: Optional[str] = None,
        password: Optional[str] = None,
        client_id: str = "iot-backend",
        subscriptions: Sequence[str] = (),
        keepalive: int = 60,
        reconnect_delay: int = 1,
    ):
        self.broker_host = broker_host
        self.broker_port = broker_port
        self.username = username
        self.password = password
        self.client_id = f"{client_id}-{int(time.time())}"
        self.subscriptions = list(subscriptions)
        self.keepalive = keepalive
        self.reconnect_delay = reconnect_delay

        self._client: Optional[mqtt.Client] = None
        self._connected = threading.Event()
        self._message_handler: Optional[MessageCallback] = None
        self._connection_count = 0

    def set_message_handler(self, handler: MessageCallback):
        """Configura el handler de mensajes."""
        self._message_handler = handler

    def connect(self, timeout: float = 5.0) -> bool:
        """Arranca el loop de red y la conexión al broker.

        La primera conexión también la reintenta paho con el backoff de
        reconnect_delay_set, así que un broker caído al arrancar no es un
        error: se devuelve True y se sigue conectando en segundo plano.

        Returns:
            False solo si el cliente no se pudo configurar
        """
        try:
            self._client = mqtt.Client(
                callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
                client_id=self.client_id,
                protocol=mqtt.MQTTv311,
                clean_session=True,
            )

            self._client.on_connect = self._on_connect
            self._client.on_disconnect = self._on_disconnect
            self._client.on_message = self._on_message
            self._client.reconnect_delay_set(
                min_delay=self.reconnect_delay,
                max_delay=max(self.reconnect_delay, 30),
            )

            if self.username:
                self._client.username_pw_set(self.username, self.password)

            logger.info("[MQTT] Connecting to %s:%d", self.broker_host, self.broker_port)
            self._client.connect_async(self.broker_host, self.broker_port, keepalive=self.keepalive)
            self._client.loop_start()

            if not self._connected.wait(timeout):
                logger.warning(
                    "[MQTT] Broker %s:%d not reachable yet, retrying in background",
                    self.broker_host,
                    self.broker_port,
                )
            return True

        except Exception as e:
            logger.exception("[MQTT] Connection failed: %s", e)
            return False

    def disconnect(self):
        """Desconecta del broker."""
        if self._client:
            try:
                self._client.loop_stop()
                self._client.disconnect()
            except Exception as e:
                logger.warning("[MQTT] Disconnect error: %s", e)
        self._connected.clear()
        MQTT_RECEIVER_CONNECTED.set(0)

    def publish(self, topic: str, payload: str, qos: int = 1) -> bool:
        """Publica un mensaje. False si el cliente no lo aceptó."""
        if self._client is None:
            logger.warning("[MQTT] Publish skipped, client not started (topic=%s)", topic)
            return False

        try:
            info = self._client.publish(topic, payload, qos=qos)
        except Exception as e:
            logger.error("[MQTT] Publish error topic=%s: %s", topic, e)
            return False

        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            logger.error(
                "[MQTT] Publish rejected topic=%s rc=%s (%s)",
                topic,
                info.rc,
                mqtt.error_string(info.rc),
            )
            return False
        return True

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        """Callback de conexión."""
        if reason_code == 0:
            self._connection_count += 1
            self._connected.set()
            MQTT_RECEIVER_CONNECTED.set(1)
            logger.info("[MQTT] Connected to broker")
            for topic in self.subscriptions:
                client.subscribe(topic, qos=1)
                logger.info("[MQTT] Subscribed to %s", topic)
        else:
            self._connected.clear()
            MQTT_RECEIVER_CONNECTED.set(0)
            logger.error("[MQTT] Connection failed: rc=%s", reason_code)

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None):
        """Callback de desconexión."""
        self._connected.clear()
        MQTT_RECEIVER_CONNECTED.set(0)
        logger.warning("[MQTT] Disconnected (rc=%s)", reason_code)

    def _on_message(self, client, userdata, msg):
        """Callback de mensaje - delega al handler."""
        if self._message_handler:
            self._message_handler(msg.topic, msg.payload)

    @property
    def is_connected(self) -> bool:
        return self._connected.is_set()

    @property
    def connection_count(self) -> int:
        """Conexiones exitosas (la primera + reconexiones)."""
        return self._connection_count
