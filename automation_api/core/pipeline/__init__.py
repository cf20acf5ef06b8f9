"""Pipeline layer - Ingesta, reglas y comandos."""

from .command_publisher import CommandPublisher
from .ingestion import IngestionProcessor, IngestionResult
from .rule_engine import RuleEngine

__all__ = ["CommandPublisher", "IngestionProcessor", "IngestionResult", "RuleEngine"]
