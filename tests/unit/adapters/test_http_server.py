"""Unit / integration tests for the registry-owned HTTP listener."""

from __future__ import annotations

import socket
from collections.abc import Iterator

import httpx
import pytest
from fastapi import APIRouter
from prometheus_client import CollectorRegistry, Gauge

from metric_registry.adapters.http import MetricsServer, ServerState
from metric_registry.errors import ServerStartError, ServerStateError
from metric_registry.options import ServerMode, public_server, server


@pytest.fixture
def collector_registry() -> CollectorRegistry:
    registry = CollectorRegistry()
    g = Gauge("up_marker", "Marker gauge.", registry=registry)
    g.set(1)
    return registry


@pytest.fixture
def metrics_server(collector_registry: CollectorRegistry) -> Iterator[MetricsServer]:
    srv = MetricsServer(collector_registry)
    yield srv
    srv.shutdown()


class TestPlainServer:
    def test_initial_state(self, metrics_server: MetricsServer) -> None:
        assert metrics_server.state is ServerState.UNSTARTED
        assert metrics_server.port() is None

    def test_ephemeral_port(self, metrics_server: MetricsServer) -> None:
        metrics_server.serve(server(0))
        port = metrics_server.port()
        assert port is not None
        assert int(port) > 0
        assert metrics_server.state is ServerState.SERVING
        assert metrics_server.mode is ServerMode.PLAIN

    def test_serves_metrics(self, metrics_server: MetricsServer) -> None:
        metrics_server.serve(server(0))
        resp = httpx.get(f"http://127.0.0.1:{metrics_server.port()}/metrics", timeout=5.0)
        assert resp.status_code == 200
        assert "up_marker 1.0" in resp.text
        assert resp.headers["content-type"].startswith("text/plain")

    def test_other_paths_are_404(self, metrics_server: MetricsServer) -> None:
        metrics_server.serve(server(0))
        resp = httpx.get(f"http://127.0.0.1:{metrics_server.port()}/other", timeout=5.0)
        assert resp.status_code == 404

    def test_custom_path(self, collector_registry: CollectorRegistry) -> None:
        srv = MetricsServer(collector_registry, path="/internal/metrics")
        srv.serve(server(0))
        try:
            base = f"http://127.0.0.1:{srv.port()}"
            assert httpx.get(f"{base}/internal/metrics", timeout=5.0).status_code == 200
            assert httpx.get(f"{base}/metrics", timeout=5.0).status_code == 404
        finally:
            srv.shutdown()

    def test_cannot_serve_twice(self, metrics_server: MetricsServer) -> None:
        metrics_server.serve(server(0))
        with pytest.raises(ServerStateError):
            metrics_server.serve(server(0))

    def test_bind_failure(self, collector_registry: CollectorRegistry) -> None:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as taken:
            taken.bind(("127.0.0.1", 0))
            taken.listen(1)
            port = taken.getsockname()[1]
            srv = MetricsServer(collector_registry)
            with pytest.raises(ServerStartError) as exc_info:
                srv.serve(server(port))
        assert exc_info.value.port == port
        assert srv.state is ServerState.UNSTARTED

    def test_shutdown(self, metrics_server: MetricsServer) -> None:
        metrics_server.serve(server(0))
        port = metrics_server.port()
        metrics_server.shutdown()
        assert metrics_server.state is ServerState.STOPPED
        with pytest.raises(httpx.TransportError):
            httpx.get(f"http://127.0.0.1:{port}/metrics", timeout=2.0)

    def test_no_restart_after_shutdown(self, metrics_server: MetricsServer) -> None:
        metrics_server.serve(server(0))
        metrics_server.shutdown()
        with pytest.raises(ServerStateError):
            metrics_server.serve(server(0))

    def test_idle_connection_is_dropped(self, collector_registry: CollectorRegistry) -> None:
        srv = MetricsServer(collector_registry, request_timeout=0.5)
        srv.serve(server(0))
        try:
            with socket.create_connection(("127.0.0.1", int(srv.port()))) as idle:
                idle.settimeout(5.0)
                assert idle.recv(1) == b""
            resp = httpx.get(f"http://127.0.0.1:{srv.port()}/metrics", timeout=5.0)
            assert resp.status_code == 200
        finally:
            srv.shutdown()


class TestPublicServer:
    def test_binds_all_interfaces(self, metrics_server: MetricsServer) -> None:
        metrics_server.serve(public_server(0))
        assert metrics_server.mode is ServerMode.PUBLIC
        resp = httpx.get(f"http://127.0.0.1:{metrics_server.port()}/metrics", timeout=5.0)
        assert resp.status_code == 200
        assert "up_marker" in resp.text


class TestAttach:
    def test_attach_state(self, metrics_server: MetricsServer) -> None:
        metrics_server.attach(APIRouter())
        assert metrics_server.state is ServerState.ATTACHED
        assert metrics_server.mode is ServerMode.ATTACHED
        assert metrics_server.port() is None

    def test_attach_after_serve_rejected(self, metrics_server: MetricsServer) -> None:
        metrics_server.serve(server(0))
        with pytest.raises(ServerStateError):
            metrics_server.attach(APIRouter())
