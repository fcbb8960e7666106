"""Registry and metric construction options.

Server options are passed to :class:`~metric_registry.registry.Registry`;
``metric_labels`` is passed to the individual ``new_*`` calls::

    registry = Registry(tls_server(0, "server.crt", "server.key", "ca.crt"))
    hits = registry.new_counter("cache_hits", "Cache hits.", metric_labels({"tier": "l1"}))
"""
from __future__ import annotations

import dataclasses
import enum
from collections.abc import Mapping

LOOPBACK = "127.0.0.1"
ALL_INTERFACES = "0.0.0.0"  # noqa: S104


class ServerMode(str, enum.Enum):
    PLAIN = "plain"
    TLS = "tls"
    PUBLIC = "public"
    ATTACHED = "attached"


@dataclasses.dataclass(frozen=True)
class ServerOption:
    """Where and how the registry's own listener is bound."""

    port: int
    host: str = LOOPBACK
    cert_file: str | None = None
    key_file: str | None = None
    ca_file: str | None = None

    @property
    def mode(self) -> ServerMode:
        if self.cert_file is not None:
            return ServerMode.TLS
        if self.host == ALL_INTERFACES:
            return ServerMode.PUBLIC
        return ServerMode.PLAIN


@dataclasses.dataclass(frozen=True)
class MetricLabels:
    """Static labels attached to a single metric at creation time."""

    labels: Mapping[str, str] = dataclasses.field(default_factory=dict)


def server(port: int) -> ServerOption:
    """Serve plain HTTP on loopback; ``port=0`` picks an ephemeral port."""
    return ServerOption(port=port)


def tls_server(port: int, cert_file: str, key_file: str, ca_file: str) -> ServerOption:
    """Serve HTTPS on loopback, requiring client certificates signed by *ca_file*."""
    return ServerOption(port=port, cert_file=cert_file, key_file=key_file, ca_file=ca_file)


def public_server(port: int) -> ServerOption:
    """Serve plain HTTP on all interfaces."""
    return ServerOption(port=port, host=ALL_INTERFACES)


def metric_labels(labels: Mapping[str, str]) -> MetricLabels:
    return MetricLabels(labels=dict(labels))


__all__ = [
    "MetricLabels",
    "ServerMode",
    "ServerOption",
    "metric_labels",
    "public_server",
    "server",
    "tls_server",
]
