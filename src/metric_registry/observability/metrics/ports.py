"""Observability – Counter, Gauge, Histogram and Vec ports."""
from __future__ import annotations

import abc
import enum
from collections.abc import Callable, Iterable, Sequence
from typing import ClassVar

from prometheus_client.metrics_core import Metric

from metric_registry.observability.metrics.keys import MetricKey


class MetricKind(str, enum.Enum):
    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"


class Instrument(abc.ABC):
    """Anything the instrument store can hold and the collector can render."""

    kind: ClassVar[MetricKind]
    key: MetricKey
    help_text: str

    @property
    def name(self) -> str:
        return self.key.name

    @abc.abstractmethod
    def collect(self) -> Iterable[Metric]:
        """Current samples of every series behind this instrument."""


class Counter(Instrument):
    """Monotonically increasing counter."""

    kind = MetricKind.COUNTER

    @abc.abstractmethod
    def add(self, value: float = 1.0) -> None: ...

    def inc(self) -> None:
        self.add(1.0)


class Gauge(Instrument):
    """Up/down gauge."""

    kind = MetricKind.GAUGE

    @abc.abstractmethod
    def set(self, value: float) -> None: ...

    @abc.abstractmethod
    def add(self, value: float) -> None: ...

    @abc.abstractmethod
    def set_function(self, fn: Callable[[], float]) -> None:
        """Read the gauge from *fn* at scrape time instead of the stored value."""

    def inc(self) -> None:
        self.add(1.0)

    def dec(self) -> None:
        self.add(-1.0)


class Histogram(Instrument):
    """Cumulative-bucket distribution."""

    kind = MetricKind.HISTOGRAM

    @abc.abstractmethod
    def observe(self, value: float) -> None: ...


class CounterVec(Instrument):
    """Counter family partitioned by label values."""

    kind = MetricKind.COUNTER

    @abc.abstractmethod
    def labels(self, *label_values: str) -> Counter: ...

    def add(self, value: float, label_values: Sequence[str]) -> None:
        self.labels(*_as_values(label_values)).add(value)

    def inc(self, label_values: Sequence[str]) -> None:
        self.labels(*_as_values(label_values)).add(1.0)


class GaugeVec(Instrument):
    """Gauge family partitioned by label values."""

    kind = MetricKind.GAUGE

    @abc.abstractmethod
    def labels(self, *label_values: str) -> Gauge: ...

    def set(self, value: float, label_values: Sequence[str]) -> None:
        self.labels(*_as_values(label_values)).set(value)

    def add(self, value: float, label_values: Sequence[str]) -> None:
        self.labels(*_as_values(label_values)).add(value)


class HistogramVec(Instrument):
    """Histogram family partitioned by label values."""

    kind = MetricKind.HISTOGRAM

    @abc.abstractmethod
    def labels(self, *label_values: str) -> Histogram: ...

    def observe(self, value: float, label_values: Sequence[str]) -> None:
        self.labels(*_as_values(label_values)).observe(value)


def _as_values(label_values: Sequence[str]) -> tuple[str, ...]:
    # a bare string is a sequence too; it would silently split into characters
    if isinstance(label_values, str):
        raise TypeError("label_values must be a sequence of strings, not a string")
    return tuple(label_values)


__all__ = [
    "Counter",
    "CounterVec",
    "Gauge",
    "GaugeVec",
    "Histogram",
    "HistogramVec",
    "Instrument",
    "MetricKind",
]
