"""Config settings – search, cache and database settings for the ERP core."""
from __future__ import annotations

import dataclasses

from erp_commons.config.settings.base import Settings
from erp_commons.config.validation import InvalidSettingValueError


@dataclasses.dataclass(frozen=True)
class SearchSettings(Settings):
    """Paging bounds applied by the query-string parser."""

    _prefix = "ERP_SEARCH"

    default_page_size: int = 20
    max_page_size: int = 100

    def _validate(self) -> None:
        self._require_positive("default_page_size", "max_page_size")
        if self.default_page_size > self.max_page_size:
            raise InvalidSettingValueError(
                "default_page_size",
                self.default_page_size,
                f"must not exceed max_page_size ({self.max_page_size})",
            )


@dataclasses.dataclass(frozen=True)
class CacheSettings(Settings):
    """Cache store location and TTL tiers (seconds)."""

    _prefix = "ERP_CACHE"

    redis_url: str | None = None
    search_ttl_seconds: float = 300.0
    entity_ttl_seconds: float = 900.0
    list_ttl_seconds: float = 1800.0

    def _validate(self) -> None:
        self._require_positive("search_ttl_seconds", "entity_ttl_seconds", "list_ttl_seconds")


@dataclasses.dataclass(frozen=True)
class DatabaseSettings(Settings):
    _prefix = "ERP_DB"

    url: str = "sqlite+aiosqlite:///./erp.db"
    echo: bool = False
    pool_pre_ping: bool = True


__all__ = ["CacheSettings", "DatabaseSettings", "SearchSettings"]
