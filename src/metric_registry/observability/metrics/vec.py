"""Observability – label-partitioned instrument families (Vecs).

A Vec wraps one labelled ``prometheus_client`` parent metric whose label
names are the sorted static and variable names. The parent's ``labels()``
creates each child once under its own lock. Vec handles declared with the
same label names in a different order share the parent; each handle maps
positional values by its own order.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from prometheus_client.metrics import MetricWrapperBase
from prometheus_client.metrics_core import Metric

from metric_registry.errors import LabelCardinalityError
from metric_registry.observability.metrics.instruments import (
    CounterSeries,
    GaugeSeries,
    HistogramSeries,
    counter_metric,
    gauge_metric,
    histogram_metric,
    normalize_buckets,
)
from metric_registry.observability.metrics.keys import MetricKey
from metric_registry.observability.metrics.ports import CounterVec, GaugeVec, HistogramVec


class _SeriesVec:
    key: MetricKey
    help_text: str

    def __init__(
        self,
        key: MetricKey,
        help_text: str,
        label_names: Sequence[str],
        *,
        _metric: MetricWrapperBase | None = None,
        _root: Any = None,
    ) -> None:
        self.key = key
        self.help_text = help_text
        self.label_names = tuple(label_names)
        self._metric = _metric if _metric is not None else self._new_metric(
            sorted(key.static_label_names + key.label_names)
        )
        self.root = _root if _root is not None else self

    def _new_metric(self, label_names: Sequence[str]) -> MetricWrapperBase:
        raise NotImplementedError

    def _series(self, labels: dict[str, str]) -> Any:
        raise NotImplementedError

    def _view_kwargs(self) -> dict[str, Any]:
        return {}

    def labels(self, *label_values: str) -> Any:
        if len(label_values) != len(self.label_names):
            raise LabelCardinalityError(self.key.name, self.label_names, label_values)
        labels = dict(self.key.static_labels)
        labels.update(zip(self.label_names, (str(v) for v in label_values)))
        return self._series(labels)

    def view(self, label_names: Sequence[str]) -> Any:
        """Return a handle on the same children addressed in *label_names* order."""
        if tuple(label_names) == self.label_names:
            return self
        return type(self)(
            self.key,
            self.help_text,
            label_names,
            _metric=self._metric,
            _root=self.root,
            **self._view_kwargs(),
        )

    def collect(self) -> Iterable[Metric]:
        return self._metric.collect()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key}, label_names={list(self.label_names)})"


class CounterSeriesVec(_SeriesVec, CounterVec):
    def _new_metric(self, label_names: Sequence[str]) -> MetricWrapperBase:
        return counter_metric(self.key, self.help_text, label_names)

    def _series(self, labels: dict[str, str]) -> CounterSeries:
        return CounterSeries(self.key, self.help_text, labels, metric=self._metric)


class GaugeSeriesVec(_SeriesVec, GaugeVec):
    def _new_metric(self, label_names: Sequence[str]) -> MetricWrapperBase:
        return gauge_metric(self.key, self.help_text, label_names)

    def _series(self, labels: dict[str, str]) -> GaugeSeries:
        return GaugeSeries(self.key, self.help_text, labels, metric=self._metric)


class HistogramSeriesVec(_SeriesVec, HistogramVec):
    def __init__(
        self,
        key: MetricKey,
        help_text: str,
        label_names: Sequence[str],
        buckets: Sequence[float] | None = None,
        **kwargs: Any,
    ) -> None:
        self.upper_bounds = normalize_buckets(buckets)
        super().__init__(key, help_text, label_names, **kwargs)

    def _new_metric(self, label_names: Sequence[str]) -> MetricWrapperBase:
        return histogram_metric(self.key, self.help_text, label_names, self.upper_bounds)

    def _series(self, labels: dict[str, str]) -> HistogramSeries:
        return HistogramSeries(self.key, self.help_text, self.upper_bounds, labels, metric=self._metric)

    def _view_kwargs(self) -> dict[str, Any]:
        return {"buckets": self.upper_bounds}


__all__ = ["CounterSeriesVec", "GaugeSeriesVec", "HistogramSeriesVec"]
