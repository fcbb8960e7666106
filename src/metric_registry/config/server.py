"""Config – metrics server settings loaded from the environment.

Example environment::

    METRICS_SERVER_MODE=tls
    METRICS_SERVER_PORT=9090
    METRICS_SERVER_CERT_FILE=/etc/metrics/server.crt
    METRICS_SERVER_KEY_FILE=/etc/metrics/server.key
    METRICS_SERVER_CA_FILE=/etc/metrics/ca.crt
"""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from metric_registry.config.settings import Settings
from metric_registry.config.validation import InvalidSettingValueError
from metric_registry.options import ServerOption, public_server, server, tls_server

_MODES = ("none", "plain", "tls", "public")


@dataclasses.dataclass
class MetricsServerSettings(Settings):
    _prefix: ClassVar[str] = "METRICS_SERVER"

    mode: str = "none"
    port: int = 0
    cert_file: str = ""
    key_file: str = ""
    ca_file: str = ""
    path: str = "/metrics"

    def _validate(self) -> None:
        self.mode = self.mode.lower()
        if self.mode not in _MODES:
            raise InvalidSettingValueError("mode", self.mode, f"expected one of {', '.join(_MODES)}")
        if not 0 <= self.port <= 65535:
            raise InvalidSettingValueError("port", self.port, "must be between 0 and 65535")
        if not self.path.startswith("/"):
            raise InvalidSettingValueError("path", self.path, "must start with '/'")
        if self.mode == "tls":
            for name in ("cert_file", "key_file", "ca_file"):
                if not getattr(self, name):
                    raise InvalidSettingValueError(name, "", "required when mode is 'tls'")

    def to_options(self) -> list[ServerOption]:
        """Registry options for this configuration; empty means attach mode."""
        if self.mode == "plain":
            return [server(self.port)]
        if self.mode == "public":
            return [public_server(self.port)]
        if self.mode == "tls":
            return [tls_server(self.port, self.cert_file, self.key_file, self.ca_file)]
        return []


__all__ = ["MetricsServerSettings"]
