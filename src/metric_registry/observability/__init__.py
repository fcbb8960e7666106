"""Observability – logging and metrics."""

from metric_registry.observability.logging import JsonLoggerFactory, Logger, get_logger
from metric_registry.observability.metrics import InstrumentStore, StoreCollector

__all__ = [
    "InstrumentStore",
    "JsonLoggerFactory",
    "Logger",
    "StoreCollector",
    "get_logger",
]
