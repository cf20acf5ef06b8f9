"""Monitoring layer - Métricas y health."""

from .health import HealthChecker, HealthStatus
from .stats import DispatcherStats, PublisherStats

__all__ = ["HealthChecker", "HealthStatus", "DispatcherStats", "PublisherStats"]
