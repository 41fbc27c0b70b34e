"""Application cache – fail-safe typed cache facade and TTL tiers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from erp_commons.application.cache.codec import JsonCacheCodec
from erp_commons.application.cache.store import CacheStore
from erp_commons.config.settings import CacheSettings
from erp_commons.kernel.errors import SerializationError
from erp_commons.observability.logging import get_logger

__all__ = ["CacheService", "CacheTtl"]

logger = get_logger(__name__)


@dataclass(frozen=True)
class CacheTtl:
    """TTL tiers in seconds: search results, single entities, full lists."""

    search: float = 300.0
    entity: float = 900.0
    list: float = 1800.0

    @classmethod
    def from_settings(cls, settings: CacheSettings) -> CacheTtl:
        return cls(
            search=settings.search_ttl_seconds,
            entity=settings.entity_ttl_seconds,
            list=settings.list_ttl_seconds,
        )


class CacheService:
    """Typed get/set/remove over a :class:`CacheStore` that never raises.

    Store failures are logged and reported as a miss (reads) or ``False``
    (writes and removals). The cache is an optimisation; the database stays
    the source of truth.
    """

    def __init__(self, store: CacheStore, codec: JsonCacheCodec | None = None) -> None:
        self._store = store
        self._codec = codec or JsonCacheCodec()

    @property
    def store(self) -> CacheStore:
        return self._store

    async def get(self, key: str, into: Any = Any) -> Any | None:
        try:
            raw = await self._store.get(key)
        except Exception as exc:  # noqa: BLE001
            logger.warning("cache.get_failed", key=key, error=repr(exc))
            return None
        if raw is None:
            logger.debug("cache.miss", key=key)
            return None
        try:
            value = self._codec.decode(raw, into)
        except SerializationError as exc:
            logger.warning("cache.decode_failed", key=key, error=exc.message)
            await self.remove(key)
            return None
        logger.debug("cache.hit", key=key)
        return value

    async def set(self, key: str, value: Any, ttl: float | None = None) -> bool:
        try:
            payload = self._codec.encode(value)
            await self._store.set(key, payload, ttl)
        except Exception as exc:  # noqa: BLE001
            logger.warning("cache.set_failed", key=key, error=repr(exc))
            return False
        logger.debug("cache.set", key=key, ttl=ttl)
        return True

    async def remove(self, key: str) -> bool:
        try:
            await self._store.delete(key)
        except Exception as exc:  # noqa: BLE001
            logger.warning("cache.remove_failed", key=key, error=repr(exc))
            return False
        logger.debug("cache.removed", key=key)
        return True

    async def remove_by_pattern(self, pattern: str) -> bool:
        try:
            removed = await self._store.delete_pattern(pattern)
        except Exception as exc:  # noqa: BLE001
            logger.warning("cache.remove_pattern_failed", pattern=pattern, error=repr(exc))
            return False
        logger.debug("cache.removed_pattern", pattern=pattern, removed=removed)
        return True
