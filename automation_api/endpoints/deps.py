"""Dependencias FastAPI: repositorios y receptor desde app.state."""

from __future__ import annotations

from fastapi import HTTPException, Request
from sqlalchemy.engine import Engine

from ..core.clock import TimestampClock
from ..core.pipeline.command_publisher import CommandPublisher
from ..core.receiver import AutomationReceiver
from ..core.repositories import DeviceRepository, ReadingRepository, RuleRepository


def get_engine(request: Request) -> Engine:
    return request.app.state.engine


def get_receiver(request: Request) -> AutomationReceiver:
    return request.app.state.receiver


def get_clock(request: Request) -> TimestampClock:
    return request.app.state.receiver.clock


def get_device_repository(request: Request) -> DeviceRepository:
    return DeviceRepository(get_engine(request))


def get_reading_repository(request: Request) -> ReadingRepository:
    return ReadingRepository(get_engine(request))


def get_rule_repository(request: Request) -> RuleRepository:
    return RuleRepository(get_engine(request))


def get_publisher(request: Request) -> CommandPublisher:
    return get_receiver(request).publisher


def db_error(e: Exception) -> HTTPException:
    """Error de BD → 500 sin exponer detalles."""
    return HTTPException(status_code=500, detail=f"DB error: {type(e).__name__}")
