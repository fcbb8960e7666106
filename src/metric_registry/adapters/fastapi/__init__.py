"""FastAPI adapter – attach the scrape route to an existing application."""
from metric_registry.adapters.fastapi.routers import FastAPIMetricsRouter, mount_metrics_route

__all__ = ["FastAPIMetricsRouter", "mount_metrics_route"]
