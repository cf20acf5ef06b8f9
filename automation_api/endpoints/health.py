"""Health and readiness endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy.engine import Engine

from common.db import check_connection
from ..core.receiver import AutomationReceiver
from .deps import get_engine, get_receiver

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Liveness probe: always ok while the process is running."""
    return {"status": "ok"}


@router.get("/ready")
def ready(engine: Engine = Depends(get_engine)):
    """Readiness probe: checks DB connectivity."""
    if not check_connection(engine):
        raise HTTPException(status_code=503, detail="not ready")
    return {"status": "ready"}


@router.get("/health/receiver")
def receiver_health(receiver: AutomationReceiver = Depends(get_receiver)):
    """Estado del receptor MQTT y contadores del pipeline."""
    return {
        **receiver.health_check(),
        "stats": receiver.stats,
    }


@router.get("/metrics")
def metrics():
    """Métricas Prometheus del proceso."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
