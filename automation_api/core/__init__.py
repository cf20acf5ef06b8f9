"""Core module - Pipeline de ingesta y automatización IoT.

Estructura:
- domain/        → Modelos, eventos y contratos
- transport/     → Cliente MQTT, topics, clasificación de mensajes
- pipeline/      → Ingesta, motor de reglas, publicación de comandos
- repositories/  → Persistencia SQL
- monitoring/    → Métricas y health
- receiver.py    → Ensamblado del pipeline
"""
