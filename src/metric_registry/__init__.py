"""
metric_registry – process-local Prometheus metrics registry.

Import path convention::

    from metric_registry import Registry, server, metric_labels
    from metric_registry.errors import InvalidMetricNameError
    from metric_registry.config import EnvSettingsLoader, MetricsServerSettings

Scrapes use the ``prometheus_client`` text encoder. Counter samples carry a
``_total`` suffix and every value and bucket boundary is written as a float,
so ``new_counter("x", ...)`` incremented by 25 renders as ``x_total 25.0``
and a bucket bounded at 1 as ``le="1.0"``.
"""

from metric_registry.options import metric_labels, public_server, server, tls_server
from metric_registry.registry import Registry

__version__ = "0.1.0"
__all__ = [
    "Registry",
    "__version__",
    "metric_labels",
    "public_server",
    "server",
    "tls_server",
]
