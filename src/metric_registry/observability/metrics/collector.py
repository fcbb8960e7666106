"""Observability – exposition adapter between the store and prometheus_client."""
from __future__ import annotations

from collections.abc import Iterable, Iterator

from prometheus_client.metrics_core import Metric
from prometheus_client.registry import Collector

from metric_registry.observability.metrics.store import Family, InstrumentStore

_CREATED_TYPES = ("counter", "histogram")


class StoreCollector(Collector):
    """Render whatever the store holds at the moment of each scrape.

    The collector keeps a live reference to the store, never a copy, so
    instruments registered after the server started show up on the next
    scrape and removed ones disappear. Every instrument of a family is
    merged into one metric family under the family's help text.
    """

    def __init__(self, store: InstrumentStore) -> None:
        self._store = store

    def describe(self) -> Iterable[Metric]:
        # names change at runtime; opt out of registry-level collision checks
        return []

    def collect(self) -> Iterator[Metric]:
        for family in self._store.families():
            merged = self._merge(family)
            if merged is not None:
                yield merged

    def _merge(self, family: Family) -> Metric | None:
        merged: Metric | None = None
        for instrument in family.instruments:
            for metric in instrument.collect():
                if merged is None:
                    merged = Metric(metric.name, family.help_text, metric.type)
                created = f"{metric.name}_created" if metric.type in _CREATED_TYPES else None
                merged.samples.extend(s for s in metric.samples if s.name != created)
        return merged


__all__ = ["StoreCollector"]
