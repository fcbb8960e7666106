"""Registry – the single entry point for declaring and serving metrics.

Usage::

    registry = Registry(server(0))
    requests = registry.new_counter_vec("requests", "Handled requests.", ["status", "app"])
    requests.add(1, ["200", "portal"])
    print(registry.port())

Invalid names, labels or buckets raise a :class:`~metric_registry.errors.UsageError`
subclass at the call site. These are wiring mistakes; let them fail startup.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from fastapi import APIRouter
from prometheus_client import CollectorRegistry, generate_latest

from metric_registry.adapters.http import MetricsServer, ServerState
from metric_registry.errors import UsageError
from metric_registry.observability.logging import Logger, get_logger
from metric_registry.observability.metrics import (
    Counter,
    CounterSeries,
    CounterSeriesVec,
    CounterVec,
    Gauge,
    GaugeSeries,
    GaugeSeriesVec,
    GaugeVec,
    Histogram,
    HistogramSeries,
    HistogramSeriesVec,
    HistogramVec,
    Instrument,
    InstrumentStore,
    MetricKey,
    MetricKind,
    StoreCollector,
    build_key,
)
from metric_registry.observability.metrics.debug import DebugMetric, debug_metrics
from metric_registry.observability.metrics.instruments import normalize_buckets
from metric_registry.options import MetricLabels, ServerOption

_HISTOGRAM_RESERVED = ("le",)


class Registry:
    """Process-local metrics registry.

    Pass at most one server option (:func:`~metric_registry.options.server`,
    :func:`~metric_registry.options.tls_server`,
    :func:`~metric_registry.options.public_server`) to open a listener.
    Without one the scrape route is attached to *router* (a FastAPI app or
    ``APIRouter``); when no router is given a fresh ``APIRouter`` is created
    and exposed as :attr:`router` for the application to include.
    """

    def __init__(
        self,
        *options: ServerOption,
        router: Any = None,
        path: str = "/metrics",
        logger: Logger | None = None,
    ) -> None:
        for option in options:
            if not isinstance(option, ServerOption):
                raise TypeError(f"Unsupported registry option: {option!r}")
        if len(options) > 1:
            raise UsageError("Only one server option may be supplied", detail={"options": [repr(o) for o in options]})
        if options and router is not None:
            raise UsageError("A server option and a router are mutually exclusive")

        self._log = logger or get_logger(__name__)
        self._store = InstrumentStore(logger=self._log)
        self._collector_registry = CollectorRegistry(auto_describe=False)
        self._collector_registry.register(StoreCollector(self._store))
        self._server = MetricsServer(self._collector_registry, path=path, logger=self._log)
        self._router: Any = None

        if options:
            self._server.serve(options[0])
        else:
            self._router = router if router is not None else APIRouter()
            self._server.attach(self._router)

    # ------------------------------------------------------------------
    # Instruments
    # ------------------------------------------------------------------

    def new_counter(self, name: str, help_text: str, *opts: MetricLabels) -> Counter:
        key = build_key(name, (), _static_labels(opts))
        return self._store.get_or_create(key, MetricKind.COUNTER, help_text, lambda h: CounterSeries(key, h))

    def new_gauge(self, name: str, help_text: str, *opts: MetricLabels) -> Gauge:
        key = build_key(name, (), _static_labels(opts))
        return self._store.get_or_create(key, MetricKind.GAUGE, help_text, lambda h: GaugeSeries(key, h))

    def new_histogram(
        self,
        name: str,
        help_text: str,
        buckets: Sequence[float] | None,
        *opts: MetricLabels,
    ) -> Histogram:
        key = build_key(name, (), _static_labels(opts), reserved=_HISTOGRAM_RESERVED)
        bounds = normalize_buckets(buckets)
        return self._store.get_or_create(
            key, MetricKind.HISTOGRAM, help_text, lambda h: HistogramSeries(key, h, bounds)
        )

    def new_counter_vec(
        self,
        name: str,
        help_text: str,
        label_names: Sequence[str],
        *opts: MetricLabels,
    ) -> CounterVec:
        key = self._vec_key(name, label_names, opts)
        vec = self._store.get_or_create(
            key, MetricKind.COUNTER, help_text, lambda h: CounterSeriesVec(key, h, label_names)
        )
        return vec.view(label_names)

    def new_gauge_vec(
        self,
        name: str,
        help_text: str,
        label_names: Sequence[str],
        *opts: MetricLabels,
    ) -> GaugeVec:
        key = self._vec_key(name, label_names, opts)
        vec = self._store.get_or_create(
            key, MetricKind.GAUGE, help_text, lambda h: GaugeSeriesVec(key, h, label_names)
        )
        return vec.view(label_names)

    def new_histogram_vec(
        self,
        name: str,
        help_text: str,
        label_names: Sequence[str],
        buckets: Sequence[float] | None,
        *opts: MetricLabels,
    ) -> HistogramVec:
        key = self._vec_key(name, label_names, opts, reserved=_HISTOGRAM_RESERVED)
        bounds = normalize_buckets(buckets)
        vec = self._store.get_or_create(
            key, MetricKind.HISTOGRAM, help_text, lambda h: HistogramSeriesVec(key, h, label_names, bounds)
        )
        return vec.view(label_names)

    @staticmethod
    def _vec_key(
        name: str,
        label_names: Sequence[str],
        opts: Sequence[MetricLabels],
        *,
        reserved: Sequence[str] = (),
    ) -> MetricKey:
        if isinstance(label_names, str):
            raise TypeError("label_names must be a sequence of strings, not a string")
        key = build_key(name, label_names, _static_labels(opts), reserved=reserved)
        if not key.label_names:
            raise UsageError(f"Vec metric {name!r} needs at least one label name")
        return key

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def remove_counter(self, counter: Counter) -> bool:
        return self._remove(counter, Counter)

    def remove_gauge(self, gauge: Gauge) -> bool:
        return self._remove(gauge, Gauge)

    def remove_histogram(self, histogram: Histogram) -> bool:
        return self._remove(histogram, Histogram)

    def remove_counter_vec(self, vec: CounterVec) -> bool:
        return self._remove(vec, CounterVec)

    def remove_gauge_vec(self, vec: GaugeVec) -> bool:
        return self._remove(vec, GaugeVec)

    def remove_histogram_vec(self, vec: HistogramVec) -> bool:
        return self._remove(vec, HistogramVec)

    def _remove(self, instrument: Instrument, expected: type[Instrument]) -> bool:
        if not isinstance(instrument, expected):
            raise TypeError(f"Expected a {expected.__name__}, got {type(instrument).__name__}")
        removed = self._store.remove(instrument)
        if removed:
            self._log.debug("metric_removed", metric=str(instrument.key))
        return removed

    # ------------------------------------------------------------------
    # Debug metrics
    # ------------------------------------------------------------------

    def register_debug_metrics(self) -> None:
        """Register process and runtime metrics; calling it again is a no-op.

        If any debug metric name is already taken by an incompatible metric,
        :class:`~metric_registry.errors.ConflictingRegistrationError` is raised
        and none of them is registered.
        """
        entries = []
        for metric in debug_metrics():
            key = build_key(metric.name)
            entries.append((key, metric.kind, metric.help_text, _debug_factory(key, metric)))
        self._store.get_or_create_all(entries)
        self._log.debug("debug_metrics_registered")

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    def port(self) -> str | None:
        """Bound port of the registry's listener; ``None`` in attach mode."""
        return self._server.port()

    @property
    def state(self) -> ServerState:
        return self._server.state

    @property
    def router(self) -> Any:
        """The router the scrape route is attached to, if in attach mode."""
        return self._router

    @property
    def collector_registry(self) -> CollectorRegistry:
        return self._collector_registry

    def render(self) -> bytes:
        """Current exposition text, exactly as a scrape would return it."""
        return generate_latest(self._collector_registry)

    def close(self) -> None:
        """Stop the listener. Not needed in the normal process lifecycle."""
        self._server.shutdown()

    def __enter__(self) -> Registry:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def _static_labels(opts: Sequence[MetricLabels]) -> Mapping[str, str]:
    labels: dict[str, str] = {}
    for opt in opts:
        if not isinstance(opt, MetricLabels):
            raise TypeError(f"Unsupported metric option: {opt!r}")
        labels.update(opt.labels)
    return labels


def _debug_factory(key: MetricKey, metric: DebugMetric) -> Callable[[str], Instrument]:
    def factory(help_text: str) -> Instrument:
        if metric.kind is MetricKind.COUNTER:
            return CounterSeries(key, help_text, source=metric.read)
        gauge = GaugeSeries(key, help_text)
        gauge.set_function(metric.read)
        return gauge

    return factory


__all__ = ["Registry"]
