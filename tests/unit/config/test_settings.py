"""Unit tests for config settings and loaders."""

from __future__ import annotations

import dataclasses

import pytest

from erp_commons.config import (
    CacheSettings,
    ConfigError,
    DatabaseSettings,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    SearchSettings,
    Settings,
)


@dataclasses.dataclass(frozen=True)
class _RequiredSettings(Settings):
    _prefix = "APP"

    name: str
    tags: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# EnvSettingsLoader
# ---------------------------------------------------------------------------


class TestEnvSettingsLoader:
    def test_defaults_when_environment_is_empty(self) -> None:
        settings = EnvSettingsLoader({}).load(SearchSettings)
        assert settings.default_page_size == 20
        assert settings.max_page_size == 100

    def test_int_coercion(self) -> None:
        env = {"ERP_SEARCH_DEFAULT_PAGE_SIZE": "10", "ERP_SEARCH_MAX_PAGE_SIZE": "50"}
        settings = EnvSettingsLoader(env).load(SearchSettings)
        assert settings.default_page_size == 10
        assert settings.max_page_size == 50

    def test_float_and_optional_coercion(self) -> None:
        env = {"ERP_CACHE_SEARCH_TTL_SECONDS": "12.5", "ERP_CACHE_REDIS_URL": "redis://cache:6379/0"}
        settings = EnvSettingsLoader(env).load(CacheSettings)
        assert settings.search_ttl_seconds == 12.5
        assert settings.redis_url == "redis://cache:6379/0"

    def test_empty_optional_is_none(self) -> None:
        settings = EnvSettingsLoader({"ERP_CACHE_REDIS_URL": ""}).load(CacheSettings)
        assert settings.redis_url is None

    def test_bool_coercion(self) -> None:
        env = {"ERP_DB_ECHO": "yes", "ERP_DB_POOL_PRE_PING": "0"}
        settings = EnvSettingsLoader(env).load(DatabaseSettings)
        assert settings.echo is True
        assert settings.pool_pre_ping is False

    def test_invalid_bool_raises(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader({"ERP_DB_ECHO": "maybe"}).load(DatabaseSettings)

    def test_invalid_int_raises(self) -> None:
        with pytest.raises(InvalidSettingValueError) as exc_info:
            EnvSettingsLoader({"ERP_SEARCH_MAX_PAGE_SIZE": "lots"}).load(SearchSettings)
        assert exc_info.value.setting_name == "ERP_SEARCH_MAX_PAGE_SIZE"

    def test_missing_required_raises(self) -> None:
        with pytest.raises(MissingRequiredSettingError) as exc_info:
            EnvSettingsLoader({}).load(_RequiredSettings)
        assert exc_info.value.setting_name == "APP_NAME"

    def test_tuple_coercion(self) -> None:
        settings = EnvSettingsLoader({"APP_NAME": "erp", "APP_TAGS": "a, b,,c"}).load(_RequiredSettings)
        assert settings.tags == ("a", "b", "c")

    def test_missing_error_is_config_error(self) -> None:
        assert issubclass(MissingRequiredSettingError, ConfigError)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestSettingsValidation:
    def test_default_above_max_rejected(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            SearchSettings(default_page_size=200, max_page_size=100)

    def test_non_positive_page_size_rejected(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            SearchSettings(default_page_size=0)

    def test_non_positive_ttl_rejected(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader({"ERP_CACHE_LIST_TTL_SECONDS": "-1"}).load(CacheSettings)

    def test_settings_are_frozen(self) -> None:
        settings = SearchSettings()
        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.max_page_size = 5  # type: ignore[misc]


# ---------------------------------------------------------------------------
# DotenvSettingsLoader
# ---------------------------------------------------------------------------


class TestDotenvSettingsLoader:
    def test_reads_env_file(self, tmp_path, monkeypatch) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("ERP_SEARCH_DEFAULT_PAGE_SIZE=15\n")
        monkeypatch.setenv("ERP_SEARCH_DEFAULT_PAGE_SIZE", "1")

        settings = DotenvSettingsLoader(str(env_file), override=True).load(SearchSettings)
        assert settings.default_page_size == 15
