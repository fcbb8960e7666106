"""Usage errors – wiring mistakes in the calling service.

These are raised at the call site and are not meant to be caught: a service
that declares a metric with an invalid name should fail at startup.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from metric_registry.errors.base import BaseError


class UsageError(BaseError):
    """The registry was used incorrectly; treat as non-recoverable."""

    default_code = "usage_error"


class InvalidMetricNameError(UsageError):
    """The metric name is not a valid exposition-format identifier."""

    default_code = "invalid_metric_name"

    def __init__(self, name: str, **kwargs: Any) -> None:
        super().__init__(
            f"Invalid metric name {name!r}: must match [a-zA-Z_:][a-zA-Z0-9_:]*",
            detail={"name": name},
            **kwargs,
        )
        self.name = name


class InvalidLabelNameError(UsageError):
    """A label name is malformed, reserved, duplicated or clashes."""

    default_code = "invalid_label_name"

    def __init__(self, label: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Invalid label name {label!r}: {reason}",
            detail={"label": label, "reason": reason},
            **kwargs,
        )
        self.label = label
        self.reason = reason


class LabelCardinalityError(UsageError):
    """The number of label values does not match the declared label names."""

    default_code = "label_cardinality"

    def __init__(self, name: str, label_names: Sequence[str], label_values: Sequence[str]) -> None:
        super().__init__(
            f"Metric {name!r} expects {len(label_names)} label value(s) "
            f"{list(label_names)}, got {len(label_values)}: {list(label_values)}",
            detail={
                "name": name,
                "label_names": list(label_names),
                "label_values": list(label_values),
            },
        )
        self.name = name


class ConflictingRegistrationError(UsageError):
    """A metric name is already registered with a different kind or schema."""

    default_code = "conflicting_registration"

    def __init__(self, name: str, existing: str, requested: str) -> None:
        super().__init__(
            f"Metric {name!r} is already registered as {existing}, cannot register it as {requested}",
            detail={"name": name, "existing": existing, "requested": requested},
        )
        self.name = name


class InvalidBucketsError(UsageError):
    """Histogram bucket boundaries are not strictly ascending finite floats."""

    default_code = "invalid_buckets"

    def __init__(self, buckets: Sequence[float], reason: str) -> None:
        super().__init__(
            f"Invalid histogram buckets {list(buckets)}: {reason}",
            detail={"buckets": list(buckets), "reason": reason},
        )


class NegativeIncrementError(UsageError):
    """Counters can only go up."""

    default_code = "negative_increment"

    def __init__(self, name: str, value: float) -> None:
        super().__init__(
            f"Counter {name!r} cannot be decreased (got increment {value})",
            detail={"name": name, "value": value},
        )


class ServerStateError(UsageError):
    """The metrics server was asked for an illegal lifecycle transition."""

    default_code = "server_state"


__all__ = [
    "ConflictingRegistrationError",
    "InvalidBucketsError",
    "InvalidLabelNameError",
    "InvalidMetricNameError",
    "LabelCardinalityError",
    "NegativeIncrementError",
    "ServerStateError",
    "UsageError",
]
