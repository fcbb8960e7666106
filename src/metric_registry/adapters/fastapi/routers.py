"""FastAPI adapter – metrics scrape route for attach mode."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request, Response
from prometheus_client import CollectorRegistry
from prometheus_client.exposition import choose_encoder


def mount_metrics_route(router: Any, registry: CollectorRegistry, path: str = "/metrics") -> None:
    """Register a ``GET path`` scrape handler on an existing app or router.

    *router* is anything exposing ``add_api_route``: a ``FastAPI`` app or an
    ``APIRouter``.
    """

    def metrics(request: Request) -> Response:
        encoder, content_type = choose_encoder(request.headers.get("accept"))
        return Response(content=encoder(registry), media_type=content_type)

    router.add_api_route(
        path,
        metrics,
        methods=["GET"],
        tags=["ops"],
        include_in_schema=False,
    )


def FastAPIMetricsRouter(registry: CollectorRegistry, path: str = "/metrics") -> APIRouter:
    """Return a new router serving *registry* at *path*."""
    router = APIRouter()
    mount_metrics_route(router, registry, path)
    return router


__all__ = ["FastAPIMetricsRouter", "mount_metrics_route"]
