"""HTTP adapter – registry-owned plain / mutual-TLS metrics listener."""
from metric_registry.adapters.http.server import MetricsServer, ServerState
from metric_registry.adapters.http.tls import build_server_context

__all__ = ["MetricsServer", "ServerState", "build_server_context"]
