"""Observability – structured logging helpers."""
from metric_registry.observability.logging.factory import JsonLoggerFactory, get_logger
from metric_registry.observability.logging.protocol import Logger

__all__ = ["JsonLoggerFactory", "Logger", "get_logger"]
