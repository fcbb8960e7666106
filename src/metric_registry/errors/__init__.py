"""Error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── UsageError                 (usage.py)
    │   ├── InvalidMetricNameError
    │   ├── InvalidLabelNameError
    │   ├── LabelCardinalityError
    │   ├── ConflictingRegistrationError
    │   ├── InvalidBucketsError
    │   ├── NegativeIncrementError
    │   ├── ServerStateError
    │   └── ConfigError            (config.validation)
    └── InfrastructureError        (infrastructure.py)
        ├── ServerStartError
        └── TLSConfigurationError
"""

from metric_registry.errors.base import BaseError
from metric_registry.errors.infrastructure import (
    InfrastructureError,
    ServerStartError,
    TLSConfigurationError,
)
from metric_registry.errors.usage import (
    ConflictingRegistrationError,
    InvalidBucketsError,
    InvalidLabelNameError,
    InvalidMetricNameError,
    LabelCardinalityError,
    NegativeIncrementError,
    ServerStateError,
    UsageError,
)

__all__ = [
    "BaseError",
    "ConflictingRegistrationError",
    "InfrastructureError",
    "InvalidBucketsError",
    "InvalidLabelNameError",
    "InvalidMetricNameError",
    "LabelCardinalityError",
    "NegativeIncrementError",
    "ServerStartError",
    "ServerStateError",
    "TLSConfigurationError",
    "UsageError",
]
