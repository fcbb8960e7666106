"""HTTP adapter – the registry-owned metrics listener.

Lifecycle::

    UNSTARTED ──serve()──▶ BOUND ──▶ SERVING ──shutdown()──▶ STOPPED
        │
        └──attach()──▶ ATTACHED

There is no way back to ``UNSTARTED``.
"""
from __future__ import annotations

import enum
import ssl
import sys
import threading
from socketserver import ThreadingMixIn
from typing import Any
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from prometheus_client import CollectorRegistry, make_wsgi_app

from metric_registry.adapters.fastapi import mount_metrics_route
from metric_registry.adapters.http.tls import build_server_context
from metric_registry.errors import ServerStartError, ServerStateError
from metric_registry.observability.logging import Logger, get_logger
from metric_registry.options import ServerMode, ServerOption


class ServerState(str, enum.Enum):
    UNSTARTED = "unstarted"
    BOUND = "bound"
    SERVING = "serving"
    ATTACHED = "attached"
    STOPPED = "stopped"


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True
    log: Any = None
    request_timeout: float | None = None

    def handle_error(self, request: Any, client_address: Any) -> None:
        exc = sys.exc_info()[1]
        self.log.warning(
            "metrics_request_rejected",
            client=client_address[0] if client_address else None,
            error=repr(exc),
        )


class _RequestHandler(WSGIRequestHandler):
    @property
    def timeout(self) -> float | None:  # type: ignore[override]
        return self.server.request_timeout

    def setup(self) -> None:
        # the handshake runs here, on the request thread, not in the accept loop
        if isinstance(self.request, ssl.SSLSocket):
            self.request.settimeout(self.timeout)
            self.request.do_handshake()
        super().setup()

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        self.server.log.debug("metrics_request", client=self.address_string(), line=format % args)


def _scrape_app(registry: CollectorRegistry, path: str) -> Any:
    metrics_app = make_wsgi_app(registry)

    def app(environ: dict[str, Any], start_response: Any) -> Any:
        if environ.get("PATH_INFO", "") != path:
            start_response("404 Not Found", [("Content-Type", "text/plain; charset=utf-8")])
            return [b"Not Found\n"]
        return metrics_app(environ, start_response)

    return app


class MetricsServer:
    """Owns at most one listener (or one attached route) for a registry.

    Each connection gets *request_timeout* seconds per socket operation, TLS
    handshake included, before its handler thread gives up.
    """

    def __init__(
        self,
        registry: CollectorRegistry,
        *,
        path: str = "/metrics",
        logger: Logger | None = None,
        request_timeout: float = 10.0,
    ) -> None:
        self._registry = registry
        self._request_timeout = request_timeout
        self._path = path
        self._log = logger or get_logger(__name__)
        self._lock = threading.Lock()
        self._state = ServerState.UNSTARTED
        self._mode: ServerMode | None = None
        self._httpd: _ThreadingWSGIServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def mode(self) -> ServerMode | None:
        return self._mode

    @property
    def path(self) -> str:
        return self._path

    def _require_unstarted(self) -> None:
        if self._state is not ServerState.UNSTARTED:
            raise ServerStateError(f"Metrics server already {self._state.value}")

    def serve(self, option: ServerOption) -> None:
        """Bind the listener described by *option* and serve on a daemon thread."""
        with self._lock:
            self._require_unstarted()
            context = None
            if option.mode is ServerMode.TLS:
                context = build_server_context(option.cert_file, option.key_file, option.ca_file)  # type: ignore[arg-type]
            try:
                httpd = make_server(
                    option.host,
                    option.port,
                    _scrape_app(self._registry, self._path),
                    server_class=_ThreadingWSGIServer,
                    handler_class=_RequestHandler,
                )
            except OSError as exc:
                raise ServerStartError(option.host, option.port, cause=exc) from exc
            httpd.log = self._log
            httpd.request_timeout = self._request_timeout
            if context is not None:
                httpd.socket = context.wrap_socket(httpd.socket, server_side=True, do_handshake_on_connect=False)
            self._httpd = httpd
            self._mode = option.mode
            self._state = ServerState.BOUND

            self._thread = threading.Thread(target=httpd.serve_forever, name="metric-registry-http", daemon=True)
            self._thread.start()
            self._state = ServerState.SERVING
        self._log.info(
            "metrics_server_listening",
            mode=option.mode.value,
            host=option.host,
            port=self.port(),
            path=self._path,
        )

    def attach(self, router: Any) -> None:
        """Register the scrape route on *router* instead of opening a listener."""
        with self._lock:
            self._require_unstarted()
            mount_metrics_route(router, self._registry, self._path)
            self._mode = ServerMode.ATTACHED
            self._state = ServerState.ATTACHED
        self._log.info("metrics_route_attached", path=self._path)

    def port(self) -> str | None:
        """The bound TCP port, or ``None`` when attached or never started."""
        httpd = self._httpd
        if httpd is None:
            return None
        return str(httpd.server_address[1])

    def shutdown(self) -> None:
        with self._lock:
            if self._state is not ServerState.SERVING or self._httpd is None:
                return
            self._httpd.shutdown()
            self._httpd.server_close()
            if self._thread is not None:
                self._thread.join(timeout=5)
            self._state = ServerState.STOPPED
        self._log.info("metrics_server_stopped", port=self.port())


__all__ = ["MetricsServer", "ServerState"]
