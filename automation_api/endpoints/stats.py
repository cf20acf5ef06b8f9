"""Estadísticas para el dashboard."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from ..core.domain.device import DeviceStatus
from ..core.repositories import DeviceRepository, ReadingRepository, RuleRepository
from ..schemas import SystemStats
from .deps import db_error, get_device_repository, get_reading_repository, get_rule_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/stats", response_model=SystemStats)
def get_stats(
    devices: DeviceRepository = Depends(get_device_repository),
    readings: ReadingRepository = Depends(get_reading_repository),
    rules: RuleRepository = Depends(get_rule_repository),
):
    try:
        return SystemStats(
            total_devices=devices.count(),
            online_devices=devices.count(status=DeviceStatus.ONLINE),
            total_readings=readings.count(),
            active_automations=rules.count_active(),
        )
    except SQLAlchemyError as e:
        logger.exception("[API] DB error computing stats err=%s", type(e).__name__)
        raise db_error(e)
