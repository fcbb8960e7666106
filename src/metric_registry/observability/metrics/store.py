"""Observability – InstrumentStore.

The store is the single source of truth for what a scrape renders. One lock
guards the check-then-insert sequence, so concurrent registrations of the
same identity produce exactly one instrument. Value updates never take it.
"""
from __future__ import annotations

import dataclasses
import threading
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from metric_registry.errors import ConflictingRegistrationError
from metric_registry.observability.logging import Logger, get_logger
from metric_registry.observability.metrics.keys import MetricKey
from metric_registry.observability.metrics.ports import Instrument, MetricKind

I = TypeVar("I", bound=Instrument)


@dataclasses.dataclass
class _Schema:
    kind: MetricKind
    static_label_names: tuple[str, ...]
    label_names: tuple[str, ...]
    help_text: str
    keys: list[MetricKey] = dataclasses.field(default_factory=list)

    def describe(self) -> str:
        return _describe(self.kind, self.static_label_names, self.label_names)


@dataclasses.dataclass(frozen=True)
class Family:
    """Snapshot of one metric family: every live instrument sharing a name."""

    name: str
    kind: MetricKind
    help_text: str
    label_names: tuple[str, ...]
    instruments: tuple[Instrument, ...]


def _describe(kind: MetricKind, static: tuple[str, ...], variable: tuple[str, ...]) -> str:
    return f"{kind.value}(static_labels={list(static)}, labels={list(variable)})"


class InstrumentStore:
    """Concurrency-safe ``MetricKey -> instrument`` map with per-name schemas."""

    def __init__(self, *, logger: Logger | None = None) -> None:
        self._log = logger or get_logger(__name__)
        self._lock = threading.RLock()
        self._instruments: dict[MetricKey, Instrument] = {}
        self._schemas: dict[str, _Schema] = {}

    def _check_schema(self, key: MetricKey, kind: MetricKind) -> _Schema | None:
        schema = self._schemas.get(key.name)
        if schema is not None and (
            schema.kind is not kind or (schema.static_label_names, schema.label_names) != key.schema
        ):
            raise ConflictingRegistrationError(
                key.name,
                existing=schema.describe(),
                requested=_describe(kind, key.static_label_names, key.label_names),
            )
        return schema

    def get_or_create(
        self,
        key: MetricKey,
        kind: MetricKind,
        help_text: str,
        factory: Callable[[str], I],
    ) -> I:
        """Return the instrument registered under *key*, creating it if absent.

        The first registration of a family fixes its help text; *factory*
        receives that authoritative text. A name already registered with a
        different kind or label schema raises
        :class:`~metric_registry.errors.ConflictingRegistrationError`.
        """
        with self._lock:
            schema = self._check_schema(key, kind)
            if schema is not None:
                if help_text != schema.help_text:
                    self._log.debug("metric_help_ignored", metric=key.name, kept=schema.help_text, ignored=help_text)
                existing = self._instruments.get(key)
                if existing is not None:
                    return existing  # type: ignore[return-value]
            instrument = factory(schema.help_text if schema is not None else help_text)
            if schema is None:
                schema = _Schema(kind, key.static_label_names, key.label_names, help_text)
                self._schemas[key.name] = schema
            schema.keys.append(key)
            self._instruments[key] = instrument
        self._log.debug("metric_registered", metric=str(key), kind=kind.value)
        return instrument

    def get_or_create_all(
        self,
        entries: Sequence[tuple[MetricKey, MetricKind, str, Callable[[str], Instrument]]],
    ) -> list[Instrument]:
        """``get_or_create`` for each entry, all or nothing.

        Every schema is checked before anything is inserted, so a conflict on
        one entry leaves the store unchanged.
        """
        with self._lock:
            for key, kind, _, _ in entries:
                self._check_schema(key, kind)
            return [self.get_or_create(*entry) for entry in entries]

    def get(self, key: MetricKey) -> Instrument | None:
        with self._lock:
            return self._instruments.get(key)

    def remove(self, instrument: Any) -> bool:
        """Unregister *instrument* (or the Vec a view belongs to).

        Returns ``False`` when it is not the instrument currently registered
        under its key, e.g. because it was already removed.
        """
        target = getattr(instrument, "root", instrument)
        key = target.key
        with self._lock:
            if self._instruments.get(key) is not target:
                return False
            del self._instruments[key]
            schema = self._schemas[key.name]
            schema.keys.remove(key)
            if not schema.keys:
                del self._schemas[key.name]
            return True

    def families(self) -> list[Family]:
        """Consistent snapshot of all families, in registration order."""
        with self._lock:
            return [
                Family(
                    name=name,
                    kind=schema.kind,
                    help_text=schema.help_text,
                    label_names=tuple(sorted(schema.static_label_names + schema.label_names)),
                    instruments=tuple(self._instruments[k] for k in schema.keys),
                )
                for name, schema in self._schemas.items()
            ]

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._instruments

    def __len__(self) -> int:
        with self._lock:
            return len(self._instruments)


__all__ = ["Family", "InstrumentStore"]
