"""Example: declare one of each instrument and serve them on an ephemeral port.

Run with::

    pip install -e .
    python docs/examples/basic_usage.py
    curl http://127.0.0.1:<port>/metrics

Set ``METRICS_SERVER_MODE`` / ``METRICS_SERVER_PORT`` to pick the listener;
without them the registry serves plain HTTP on an ephemeral loopback port.
"""
from __future__ import annotations

import logging
import signal
import threading

from metric_registry import Registry, server
from metric_registry.config import EnvSettingsLoader, MetricsServerSettings
from metric_registry.observability import JsonLoggerFactory, get_logger


def main() -> None:
    JsonLoggerFactory.configure(level=logging.INFO)
    log = get_logger("basic_usage")

    settings = EnvSettingsLoader().load(MetricsServerSettings)
    options = settings.to_options() or [server(0)]
    registry = Registry(*options, path=settings.path, logger=log)
    registry.register_debug_metrics()

    counter = registry.new_counter("counter_name", "An example counter.")
    counter_vec = registry.new_counter_vec("counter_vector_name", "An example counter vector.", ["status", "app"])
    gauge = registry.new_gauge("gauge_name", "An example gauge.")
    gauge_vec = registry.new_gauge_vec("gauge_vector_name", "An example gauge vector.", ["state", "source"])
    histogram = registry.new_histogram("histogram_name", "An example histogram.", [1.0])
    histogram_vec = registry.new_histogram_vec(
        "histogram_vector_name", "An example histogram vector.", ["mode"], [10, 50, 100]
    )

    counter.add(10)
    counter_vec.add(0.25, ["success", "IntranetPortal"])
    gauge.set(38)
    gauge_vec.set(12.5, ["active", "MobileApp"])
    gauge_vec.add(0.5, ["active", "MobileApp"])
    histogram.observe(98.01234)
    histogram_vec.observe(67, ["detached"])

    # same name, help and labels: the existing counter comes back, so it reads 25
    registry.new_counter("counter_name", "An example counter.").add(15)

    log.info("example_ready", port=registry.port(), path=settings.path)

    stop = threading.Event()
    signal.signal(signal.SIGTERM, lambda *_: stop.set())
    signal.signal(signal.SIGINT, lambda *_: stop.set())
    stop.wait()
    registry.close()


if __name__ == "__main__":
    main()
