"""IoT automation service: ingesta MQTT, estado de dispositivos y reglas."""
