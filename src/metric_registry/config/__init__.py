"""Config – 12-factor settings and loaders."""

from metric_registry.config.server import MetricsServerSettings
from metric_registry.config.settings import EnvSettingsLoader, Settings, SettingsLoader
from metric_registry.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MetricsServerSettings",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
