"""Observability – metric instruments, store and exposition adapter."""
from metric_registry.observability.metrics.collector import StoreCollector
from metric_registry.observability.metrics.instruments import (
    DEFAULT_BUCKETS,
    CounterSeries,
    GaugeSeries,
    HistogramSeries,
)
from metric_registry.observability.metrics.keys import MetricKey, build_key
from metric_registry.observability.metrics.ports import (
    Counter,
    CounterVec,
    Gauge,
    GaugeVec,
    Histogram,
    HistogramVec,
    Instrument,
    MetricKind,
)
from metric_registry.observability.metrics.store import Family, InstrumentStore
from metric_registry.observability.metrics.vec import CounterSeriesVec, GaugeSeriesVec, HistogramSeriesVec

__all__ = [
    "DEFAULT_BUCKETS",
    "Counter",
    "CounterSeries",
    "CounterSeriesVec",
    "CounterVec",
    "Family",
    "Gauge",
    "GaugeSeries",
    "GaugeSeriesVec",
    "GaugeVec",
    "Histogram",
    "HistogramSeries",
    "HistogramSeriesVec",
    "HistogramVec",
    "Instrument",
    "InstrumentStore",
    "MetricKey",
    "MetricKind",
    "StoreCollector",
    "build_key",
]
