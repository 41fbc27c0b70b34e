"""Redis adapter – RedisCacheStore."""
from __future__ import annotations

from typing import Any

from erp_commons.config.settings import CacheSettings


def _require_redis() -> Any:
    try:
        import redis.asyncio as aioredis
        return aioredis
    except ImportError as exc:
        raise ImportError("Install 'erp-commons[redis]' to use the Redis adapter") from exc


class RedisCacheStore:
    """Async Redis implementation of :class:`~erp_commons.application.cache.CacheStore`.

    Pattern deletion walks the keyspace with ``SCAN MATCH`` (never ``KEYS``)
    and deletes matches in batches of ``scan_count``.
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        client: Any = None,
        scan_count: int = 500,
        **kwargs: Any,
    ) -> None:
        if client is None:
            if url is None:
                raise ValueError("RedisCacheStore needs a url or a client")
            aioredis = _require_redis()
            client = aioredis.from_url(url, **kwargs)
        self._client = client
        self._scan_count = scan_count

    @classmethod
    def from_settings(cls, settings: CacheSettings, **kwargs: Any) -> RedisCacheStore:
        return cls(settings.redis_url, **kwargs)

    async def get(self, key: str) -> bytes | None:
        return await self._client.get(key)

    async def set(self, key: str, value: bytes, ttl: float | None = None) -> None:
        if ttl is None:
            await self._client.set(key, value)
        else:
            await self._client.set(key, value, px=max(1, int(ttl * 1000)))

    async def delete(self, key: str) -> None:
        await self._client.delete(key)

    async def delete_pattern(self, pattern: str) -> int:
        removed = 0
        batch: list[Any] = []
        async for key in self._client.scan_iter(match=pattern, count=self._scan_count):
            batch.append(key)
            if len(batch) >= self._scan_count:
                removed += await self._client.delete(*batch)
                batch = []
        if batch:
            removed += await self._client.delete(*batch)
        return removed

    async def close(self) -> None:
        await self._client.aclose()


__all__ = ["RedisCacheStore"]
