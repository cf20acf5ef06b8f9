"""Endpoints de dispositivos y sus lecturas."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..core.clock import TimestampClock
from ..core.repositories import DeviceRepository, ReadingRepository
from ..schemas import ChangeResult, DeviceIn, DeviceOut, DeviceUpdate, LatestReadingOut, ReadingOut
from .deps import db_error, get_clock, get_device_repository, get_reading_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/devices", tags=["devices"])


@router.get("", response_model=List[DeviceOut])
def list_devices(devices: DeviceRepository = Depends(get_device_repository)):
    try:
        return devices.list_all()
    except SQLAlchemyError as e:
        logger.exception("[API] DB error listing devices err=%s", type(e).__name__)
        raise db_error(e)


@router.get("/{device_id}", response_model=DeviceOut)
def get_device(device_id: str, devices: DeviceRepository = Depends(get_device_repository)):
    try:
        device = devices.get(device_id)
    except SQLAlchemyError as e:
        logger.exception("[API] DB error reading device %s err=%s", device_id, type(e).__name__)
        raise db_error(e)

    if device is None:
        raise HTTPException(status_code=404, detail="Device not found")
    return device


@router.post("", response_model=DeviceOut, status_code=201)
def register_device(
    payload: DeviceIn,
    devices: DeviceRepository = Depends(get_device_repository),
    clock: TimestampClock = Depends(get_clock),
):
    """Registra un dispositivo. Queda offline hasta su primer mensaje."""
    try:
        return devices.register(
            device_id=payload.device_id,
            name=payload.name,
            type=payload.type,
            location=payload.location,
            created_at=clock.now(),
        )
    except IntegrityError:
        raise HTTPException(status_code=409, detail=f"Device '{payload.device_id}' already exists")
    except SQLAlchemyError as e:
        logger.exception("[API] DB error registering device err=%s", type(e).__name__)
        raise db_error(e)


@router.put("/{device_id}", response_model=ChangeResult)
def update_device(
    device_id: str,
    payload: DeviceUpdate,
    devices: DeviceRepository = Depends(get_device_repository),
):
    try:
        changes = devices.update(device_id, payload.name, payload.type, payload.location)
    except SQLAlchemyError as e:
        logger.exception("[API] DB error updating device %s err=%s", device_id, type(e).__name__)
        raise db_error(e)
    return ChangeResult(message="Device updated", changes=changes)


@router.delete("/{device_id}", response_model=ChangeResult)
def delete_device(device_id: str, devices: DeviceRepository = Depends(get_device_repository)):
    try:
        changes = devices.delete(device_id)
    except SQLAlchemyError as e:
        logger.exception("[API] DB error deleting device %s err=%s", device_id, type(e).__name__)
        raise db_error(e)
    return ChangeResult(message="Device deleted", changes=changes)


@router.get("/{device_id}/data", response_model=List[ReadingOut])
def list_device_readings(
    device_id: str,
    limit: int = Query(default=100, ge=1, le=1000),
    readings: ReadingRepository = Depends(get_reading_repository),
):
    """Lecturas del dispositivo, más recientes primero."""
    try:
        return readings.list_for_device(device_id, limit=limit)
    except SQLAlchemyError as e:
        logger.exception("[API] DB error reading data for %s err=%s", device_id, type(e).__name__)
        raise db_error(e)


@router.get("/{device_id}/latest", response_model=List[LatestReadingOut])
def latest_device_readings(
    device_id: str,
    readings: ReadingRepository = Depends(get_reading_repository),
):
    """Última lectura de cada tipo de sensor."""
    try:
        return readings.latest_for_device(device_id)
    except SQLAlchemyError as e:
        logger.exception("[API] DB error reading latest for %s err=%s", device_id, type(e).__name__)
        raise db_error(e)
