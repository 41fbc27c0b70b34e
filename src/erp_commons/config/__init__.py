"""Config – 12-factor settings and loaders."""

from erp_commons.config.settings import (
    CacheSettings,
    DatabaseSettings,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    SearchSettings,
    Settings,
    SettingsLoader,
)
from erp_commons.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "CacheSettings",
    "ConfigError",
    "DatabaseSettings",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "SearchSettings",
    "Settings",
    "SettingsLoader",
]
