"""Config settings – 12-factor env-based configuration."""
from erp_commons.config.settings.base import Settings
from erp_commons.config.settings.erp import CacheSettings, DatabaseSettings, SearchSettings
from erp_commons.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = [
    "CacheSettings",
    "DatabaseSettings",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "SearchSettings",
    "Settings",
    "SettingsLoader",
]
