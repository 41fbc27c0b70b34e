"""Application cache – keys, stores, codec, fail-safe service and cache-aside base."""
from erp_commons.application.cache.aside import CachedEntityService, SearchFields
from erp_commons.application.cache.codec import JsonCacheCodec
from erp_commons.application.cache.keys import (
    COMPANY_KEYS,
    USER_COMPANY_KEYS,
    USER_KEYS,
    EntityCacheKeys,
    search_hash,
)
from erp_commons.application.cache.service import CacheService, CacheTtl
from erp_commons.application.cache.store import (
    BasicCacheStore,
    CacheStore,
    InMemoryCacheStore,
    KeyTrackingCacheStore,
)

__all__ = [
    "COMPANY_KEYS",
    "USER_COMPANY_KEYS",
    "USER_KEYS",
    "BasicCacheStore",
    "CacheService",
    "CacheStore",
    "CacheTtl",
    "CachedEntityService",
    "EntityCacheKeys",
    "InMemoryCacheStore",
    "JsonCacheCodec",
    "KeyTrackingCacheStore",
    "SearchFields",
    "search_hash",
]
