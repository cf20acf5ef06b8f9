from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .core.domain.rule import RuleCondition


class DeviceIn(BaseModel):
    device_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    type: Optional[str] = None
    location: Optional[str] = None


class DeviceUpdate(BaseModel):
    name: str = Field(..., min_length=1)
    type: Optional[str] = None
    location: Optional[str] = None


class DeviceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    device_id: str
    name: str
    type: Optional[str] = None
    location: Optional[str] = None
    status: str
    last_seen: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ReadingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    device_id: str
    sensor_type: str
    value: float
    unit: Optional[str] = None
    timestamp: datetime


class LatestReadingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sensor_type: str
    value: float
    unit: Optional[str] = None
    timestamp: datetime


class AutomationIn(BaseModel):
    name: str = Field(..., min_length=1)
    device_id: str = Field(..., min_length=1)
    sensor_type: str = Field(..., min_length=1)
    condition: RuleCondition
    threshold: float
    action: str = Field(..., min_length=1)


class AutomationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    device_id: str
    sensor_type: str
    condition: str
    threshold: float
    action: str
    active: bool
    created_at: Optional[datetime] = None


class ChangeResult(BaseModel):
    message: str
    changes: int


class CommandIn(BaseModel):
    command: str = Field(..., min_length=1)


class CommandSent(BaseModel):
    message: str
    topic: str
    command: str


class SystemStats(BaseModel):
    total_devices: int
    online_devices: int
    total_readings: int
    active_automations: int