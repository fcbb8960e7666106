"""Observability – concrete single-series instruments.

Each series is a thin port over one labelset of a ``prometheus_client``
metric created with ``registry=None``; the store, not the library's global
registry, decides what a scrape renders. Value updates go through the
library's per-value locks and never contend with registration or removal.
"""
from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

import prometheus_client
from prometheus_client.core import CounterMetricFamily
from prometheus_client.metrics import MetricWrapperBase
from prometheus_client.metrics_core import Metric

from metric_registry.errors import InvalidBucketsError, NegativeIncrementError
from metric_registry.observability.metrics.keys import MetricKey
from metric_registry.observability.metrics.ports import Counter, Gauge, Histogram

DEFAULT_BUCKETS: tuple[float, ...] = tuple(
    b for b in prometheus_client.Histogram.DEFAULT_BUCKETS if b != math.inf
)


def normalize_buckets(buckets: Sequence[float] | None) -> tuple[float, ...]:
    """Return strictly ascending finite boundaries; ``+Inf`` is implicit."""
    if not buckets:
        return DEFAULT_BUCKETS
    bounds = [float(b) for b in buckets]
    if bounds[-1] == math.inf:
        bounds.pop()
    if not bounds:
        raise InvalidBucketsError(buckets, "at least one finite boundary is required")
    for b in bounds:
        if math.isnan(b) or math.isinf(b):
            raise InvalidBucketsError(buckets, "boundaries must be finite numbers")
    for lower, upper in zip(bounds, bounds[1:]):
        if upper <= lower:
            raise InvalidBucketsError(buckets, "boundaries must be strictly ascending")
    return tuple(bounds)


class _NaNHistogram(prometheus_client.Histogram):
    """Histogram that counts NaN observations in the ``+Inf`` bucket.

    ``NaN <= bound`` is false for every bound, so the stock histogram only
    adds NaN to ``_sum``. Children created by ``labels()`` keep this class.
    """

    def observe(self, amount: float, exemplar: dict[str, str] | None = None) -> None:
        super().observe(amount, exemplar)
        if math.isnan(amount):
            self._buckets[-1].inc(1)


def counter_metric(key: MetricKey, help_text: str, label_names: Sequence[str]) -> prometheus_client.Counter:
    return prometheus_client.Counter(key.name, help_text, labelnames=tuple(label_names), registry=None)


def gauge_metric(key: MetricKey, help_text: str, label_names: Sequence[str]) -> prometheus_client.Gauge:
    return prometheus_client.Gauge(key.name, help_text, labelnames=tuple(label_names), registry=None)


def histogram_metric(
    key: MetricKey,
    help_text: str,
    label_names: Sequence[str],
    buckets: Sequence[float],
) -> prometheus_client.Histogram:
    return _NaNHistogram(
        key.name, help_text, labelnames=tuple(label_names), buckets=tuple(buckets), registry=None
    )


class _LibrarySeries:
    """One labelset of a library metric.

    *metric* is the labelled parent when the series belongs to a Vec; a
    standalone series creates its own, labelled by its static label names.
    """

    def __init__(
        self,
        key: MetricKey,
        help_text: str,
        labels: Mapping[str, str] | None = None,
        *,
        metric: MetricWrapperBase | None = None,
    ) -> None:
        self.key = key
        self.help_text = help_text
        self._labels = dict(labels if labels is not None else key.static_labels)
        self._metric = metric if metric is not None else self._new_metric(key.static_label_names)
        self._child: Any = self._metric.labels(**self._labels) if self._labels else self._metric

    def _new_metric(self, label_names: Sequence[str]) -> MetricWrapperBase:
        raise NotImplementedError

    def collect(self) -> Iterable[Metric]:
        return self._metric.collect()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key}, labels={self._labels!r})"


class CounterSeries(_LibrarySeries, Counter):
    """A single counter series.

    With *source* the value is read from the callable at scrape time and
    ``add`` has no visible effect.
    """

    def __init__(
        self,
        key: MetricKey,
        help_text: str,
        labels: Mapping[str, str] | None = None,
        *,
        metric: MetricWrapperBase | None = None,
        source: Callable[[], float] | None = None,
    ) -> None:
        super().__init__(key, help_text, labels, metric=metric)
        self._source = source

    def _new_metric(self, label_names: Sequence[str]) -> MetricWrapperBase:
        return counter_metric(self.key, self.help_text, label_names)

    def add(self, value: float = 1.0) -> None:
        if value < 0:
            raise NegativeIncrementError(self.key.name, value)
        self._child.inc(value)

    def collect(self) -> Iterable[Metric]:
        if self._source is None:
            return super().collect()
        family = CounterMetricFamily(self.key.name, self.help_text, labels=list(self._labels))
        family.add_metric(list(self._labels.values()), float(self._source()))
        return [family]


class GaugeSeries(_LibrarySeries, Gauge):
    """A single gauge series."""

    def _new_metric(self, label_names: Sequence[str]) -> MetricWrapperBase:
        return gauge_metric(self.key, self.help_text, label_names)

    def set(self, value: float) -> None:
        self._child.set(value)

    def add(self, value: float) -> None:
        self._child.inc(value)

    def set_function(self, fn: Callable[[], float]) -> None:
        self._child.set_function(fn)


class HistogramSeries(_LibrarySeries, Histogram):
    """A single histogram series with cumulative buckets."""

    def __init__(
        self,
        key: MetricKey,
        help_text: str,
        buckets: Sequence[float] | None = None,
        labels: Mapping[str, str] | None = None,
        *,
        metric: MetricWrapperBase | None = None,
    ) -> None:
        self.upper_bounds = normalize_buckets(buckets)
        super().__init__(key, help_text, labels, metric=metric)

    def _new_metric(self, label_names: Sequence[str]) -> MetricWrapperBase:
        return histogram_metric(self.key, self.help_text, label_names, self.upper_bounds)

    def observe(self, value: float) -> None:
        self._child.observe(value)


__all__ = [
    "CounterSeries",
    "DEFAULT_BUCKETS",
    "GaugeSeries",
    "HistogramSeries",
    "counter_metric",
    "gauge_metric",
    "histogram_metric",
    "normalize_buckets",
]
