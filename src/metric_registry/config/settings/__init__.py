"""Config settings – 12-factor env-based configuration."""
from metric_registry.config.settings.base import Settings
from metric_registry.config.settings.loaders import EnvSettingsLoader, SettingsLoader

__all__ = ["EnvSettingsLoader", "Settings", "SettingsLoader"]
