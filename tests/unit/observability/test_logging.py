"""Unit tests for observability logging."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest
import structlog
from structlog.testing import capture_logs

from metric_registry.observability.logging import JsonLoggerFactory, Logger, get_logger


@pytest.fixture
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestGetLogger:
    def test_returns_logger_protocol(self) -> None:
        log: Logger = get_logger("metric_registry.test")
        assert callable(log.info)
        assert callable(log.warning)

    def test_initial_values_are_bound(self) -> None:
        with capture_logs() as logs:
            get_logger("metric_registry.test", component="store").info("hello", n=1)
        assert logs == [{"component": "store", "n": 1, "event": "hello", "log_level": "info"}]


class TestJsonLoggerFactory:
    def test_emits_json(self, restore_logging: None, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure(level=logging.INFO)
        get_logger("metric_registry.json").info("metrics_server_listening", port="9090")
        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "metrics_server_listening"
        assert payload["port"] == "9090"
        assert payload["level"] == "info"
        assert payload["logger"] == "metric_registry.json"
        assert "timestamp" in payload

    def test_level_filters(self, restore_logging: None, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure(level=logging.WARNING)
        get_logger("metric_registry.json").info("dropped")
        assert "dropped" not in capsys.readouterr().err
