"""Persistencia SQL de dispositivos, lecturas y reglas."""

from .devices import DeviceRepository
from .readings import ReadingRepository
from .rules import RuleRepository

__all__ = ["DeviceRepository", "ReadingRepository", "RuleRepository"]
