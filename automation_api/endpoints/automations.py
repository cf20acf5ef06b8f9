"""Endpoints de reglas de automatización."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from ..core.clock import TimestampClock
from ..core.repositories import RuleRepository
from ..schemas import AutomationIn, AutomationOut, ChangeResult
from .deps import db_error, get_clock, get_rule_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/automations", tags=["automations"])


@router.get("", response_model=List[AutomationOut])
def list_automations(rules: RuleRepository = Depends(get_rule_repository)):
    try:
        return rules.list_all()
    except SQLAlchemyError as e:
        logger.exception("[API] DB error listing automations err=%s", type(e).__name__)
        raise db_error(e)


@router.post("", response_model=AutomationOut, status_code=201)
def create_automation(
    payload: AutomationIn,
    rules: RuleRepository = Depends(get_rule_repository),
    clock: TimestampClock = Depends(get_clock),
):
    """Crea una regla (activa). Se evalúa desde la siguiente telemetría."""
    try:
        return rules.create(
            name=payload.name,
            device_id=payload.device_id,
            sensor_type=payload.sensor_type,
            condition=payload.condition.value,
            threshold=payload.threshold,
            action=payload.action,
            created_at=clock.now(),
        )
    except SQLAlchemyError as e:
        logger.exception("[API] DB error creating automation err=%s", type(e).__name__)
        raise db_error(e)


@router.put("/{rule_id}/toggle", response_model=ChangeResult)
def toggle_automation(rule_id: int, rules: RuleRepository = Depends(get_rule_repository)):
    try:
        changes = rules.toggle(rule_id)
    except SQLAlchemyError as e:
        logger.exception("[API] DB error toggling automation %d err=%s", rule_id, type(e).__name__)
        raise db_error(e)
    return ChangeResult(message="Automation toggled", changes=changes)


@router.delete("/{rule_id}", response_model=ChangeResult)
def delete_automation(rule_id: int, rules: RuleRepository = Depends(get_rule_repository)):
    try:
        changes = rules.delete(rule_id)
    except SQLAlchemyError as e:
        logger.exception("[API] DB error deleting automation %d err=%s", rule_id, type(e).__name__)
        raise db_error(e)
    return ChangeResult(message="Automation deleted", changes=changes)
