from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from common.config import Settings, get_settings
from common.db import get_engine
from common.logging_config import setup_logging
from common.schema import ensure_schema
from .core.receiver import AutomationReceiver
from .core.transport.mqtt_client import MQTTClient
from .endpoints import (
    automations_router,
    commands_router,
    devices_router,
    health_router,
    stats_router,
)

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    engine: Optional[Engine] = None,
    mqtt_client: Optional[MQTTClient] = None,
) -> FastAPI:
    """Crea la app FastAPI.

    engine y mqtt_client se pueden inyectar (tests); si no, se construyen
    desde settings al arrancar.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db_engine = engine or get_engine(settings)
        ensure_schema(db_engine)

        receiver = AutomationReceiver(settings, db_engine, mqtt_client=mqtt_client)
        if settings.mqtt_enabled:
            if not receiver.start():
                # Solo falla si el cliente no se pudo configurar; la API sigue disponible.
                logger.error("[API] MQTT receiver not started, ingestion disabled")
        else:
            logger.info("[API] MQTT disabled by config (MQTT_ENABLED=false)")

        app.state.settings = settings
        app.state.engine = db_engine
        app.state.receiver = receiver
        try:
            yield
        finally:
            receiver.stop()
            if engine is None:
                db_engine.dispose()
            logger.info("[API] Shutdown complete")

    app = FastAPI(title="IoT Automation Service", version="1.0.0", lifespan=lifespan)
    app.include_router(health_router)
    app.include_router(devices_router)
    app.include_router(commands_router)
    app.include_router(automations_router)
    app.include_router(stats_router)
    return app


def _build_default_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)
    return create_app(settings)


# uvicorn automation_api.main:app
app = _build_default_app()
