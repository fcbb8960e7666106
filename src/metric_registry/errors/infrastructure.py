"""Infrastructure errors – listener and TLS material failures."""

from __future__ import annotations

from typing import Any

from metric_registry.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a usage mistake."""

    default_code = "infrastructure_error"


class ServerStartError(InfrastructureError):
    """The metrics listener could not be bound."""

    default_code = "server_start_error"

    def __init__(
        self,
        host: str,
        port: int,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message or f"Could not bind metrics server on {host}:{port}",
            detail={"host": host, "port": port},
            **kwargs,
        )
        self.host = host
        self.port = port


class TLSConfigurationError(InfrastructureError):
    """Certificate, key or CA bundle could not be loaded."""

    default_code = "tls_configuration_error"

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, detail={"path": path}, **kwargs)
        self.path = path


__all__ = ["InfrastructureError", "ServerStartError", "TLSConfigurationError"]
