"""Application cache – byte-level cache store port and in-process stores."""
from __future__ import annotations

from fnmatch import fnmatchcase
from typing import Protocol

from erp_commons.kernel.time import Clock, SystemClock

__all__ = ["BasicCacheStore", "CacheStore", "InMemoryCacheStore", "KeyTrackingCacheStore"]


class BasicCacheStore(Protocol):
    """Key-value store without key enumeration."""

    async def get(self, key: str) -> bytes | None: ...
    async def set(self, key: str, value: bytes, ttl: float | None = None) -> None: ...
    async def delete(self, key: str) -> None: ...


class CacheStore(BasicCacheStore, Protocol):
    """Key-value store that can also remove every key matching a glob pattern."""

    async def delete_pattern(self, pattern: str) -> int: ...


class InMemoryCacheStore:
    """Process-local store with per-key TTL and glob pattern deletion.

    Expired entries are dropped lazily on access. A pattern sweep also purges
    every expired entry, whatever its prefix.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._entries: dict[str, tuple[bytes, float | None]] = {}

    async def get(self, key: str) -> bytes | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock.monotonic() >= expires_at:
            self._entries.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: bytes, ttl: float | None = None) -> None:
        expires_at = self._clock.monotonic() + ttl if ttl is not None else None
        self._entries[key] = (value, expires_at)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def delete_pattern(self, pattern: str) -> int:
        self._purge_expired()
        matched = [key for key in self._entries if fnmatchcase(key, pattern)]
        for key in matched:
            del self._entries[key]
        return len(matched)

    def _purge_expired(self) -> None:
        now = self._clock.monotonic()
        expired = [
            key for key, (_, expires_at) in self._entries.items()
            if expires_at is not None and now >= expires_at
        ]
        for key in expired:
            del self._entries[key]

    def size(self) -> int:
        """Stored entries, expired ones not yet purged included."""
        return len(self._entries)

    def keys(self) -> list[str]:
        """Live (unexpired) keys, sorted."""
        now = self._clock.monotonic()
        return sorted(
            key for key, (_, expires_at) in self._entries.items()
            if expires_at is None or now < expires_at
        )


class KeyTrackingCacheStore:
    """Adds pattern deletion to a store that cannot enumerate its keys.

    Every key written through this wrapper is recorded with its expiry;
    pattern sweeps match against the record and delete the hits from the
    inner store. Keys written by other processes are invisible to the sweep
    and expire by TTL.

    The record is pruned of expired keys on every write and sweep, and a key
    is forgotten as soon as a read through the wrapper misses.
    """

    def __init__(self, inner: BasicCacheStore, clock: Clock | None = None) -> None:
        self._inner = inner
        self._clock = clock or SystemClock()
        self._issued: dict[str, float | None] = {}

    async def get(self, key: str) -> bytes | None:
        value = await self._inner.get(key)
        if value is None:
            self._issued.pop(key, None)
        return value

    async def set(self, key: str, value: bytes, ttl: float | None = None) -> None:
        await self._inner.set(key, value, ttl)
        self._prune()
        self._issued[key] = self._clock.monotonic() + ttl if ttl is not None else None

    async def delete(self, key: str) -> None:
        await self._inner.delete(key)
        self._issued.pop(key, None)

    async def delete_pattern(self, pattern: str) -> int:
        self._prune()
        matched = sorted(key for key in self._issued if fnmatchcase(key, pattern))
        for key in matched:
            await self._inner.delete(key)
            self._issued.pop(key, None)
        return len(matched)

    def _prune(self) -> None:
        now = self._clock.monotonic()
        expired = [key for key, expires_at in self._issued.items() if expires_at is not None and now >= expires_at]
        for key in expired:
            del self._issued[key]

    @property
    def tracked_keys(self) -> frozenset[str]:
        return frozenset(self._issued)
