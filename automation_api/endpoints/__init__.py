"""Módulo de endpoints HTTP.

Contiene los endpoints de la API organizados por recurso.
"""

from .automations import router as automations_router
from .commands import router as commands_router
from .devices import router as devices_router
from .health import router as health_router
from .stats import router as stats_router

__all__ = [
    "automations_router",
    "commands_router",
    "devices_router",
    "health_router",
    "stats_router",
]
