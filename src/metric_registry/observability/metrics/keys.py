"""Metric identity keys and name validation."""
from __future__ import annotations

import dataclasses
import re
from collections.abc import Iterable, Mapping

from metric_registry.errors import InvalidLabelNameError, InvalidMetricNameError

_METRIC_NAME_RE = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")
_LABEL_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


@dataclasses.dataclass(frozen=True)
class MetricKey:
    """Canonical, order-independent identity of one registered instrument.

    ``static_label_names`` and ``label_names`` together form the family
    schema; ``static_labels`` pins the concrete series inside the family.
    """

    name: str
    static_label_names: tuple[str, ...] = ()
    label_names: tuple[str, ...] = ()
    static_labels: tuple[tuple[str, str], ...] = ()

    @property
    def schema(self) -> tuple[tuple[str, ...], tuple[str, ...]]:
        return self.static_label_names, self.label_names

    def __str__(self) -> str:
        parts = [f'{k}="{v}"' for k, v in self.static_labels]
        parts.extend(f"{n}=*" for n in self.label_names)
        return f"{self.name}{{{','.join(parts)}}}" if parts else self.name


def validate_metric_name(name: str) -> None:
    if not isinstance(name, str) or not _METRIC_NAME_RE.match(name):
        raise InvalidMetricNameError(str(name))


def validate_label_names(names: Iterable[str], *, reserved: Iterable[str] = ()) -> tuple[str, ...]:
    """Validate label names and return them as a tuple in declared order."""
    reserved = frozenset(reserved)
    seen: set[str] = set()
    result: list[str] = []
    for label in names:
        if not isinstance(label, str) or not _LABEL_NAME_RE.match(label):
            raise InvalidLabelNameError(str(label), "must match [a-zA-Z_][a-zA-Z0-9_]*")
        if label.startswith("__"):
            raise InvalidLabelNameError(label, "names starting with '__' are reserved")
        if label in reserved:
            raise InvalidLabelNameError(label, "reserved for this metric type")
        if label in seen:
            raise InvalidLabelNameError(label, "declared more than once")
        seen.add(label)
        result.append(label)
    return tuple(result)


def build_key(
    name: str,
    label_names: Iterable[str] = (),
    static_labels: Mapping[str, str] | None = None,
    *,
    reserved: Iterable[str] = (),
) -> MetricKey:
    """Validate *name* and labels, and derive the canonical :class:`MetricKey`.

    The key does not depend on the order in which label names were declared
    or in which static labels were supplied.
    """
    validate_metric_name(name)
    variable = validate_label_names(label_names, reserved=reserved)
    static = dict(static_labels or {})
    validate_label_names(static, reserved=reserved)
    overlap = sorted(set(static) & set(variable))
    if overlap:
        raise InvalidLabelNameError(overlap[0], "used as both a static and a variable label")
    return MetricKey(
        name=name,
        static_label_names=tuple(sorted(static)),
        label_names=tuple(sorted(variable)),
        static_labels=tuple(sorted((k, str(v)) for k, v in static.items())),
    )


__all__ = ["MetricKey", "build_key", "validate_label_names", "validate_metric_name"]
