"""Redis adapter – cache store."""
from erp_commons.adapters.redis.cache import RedisCacheStore

__all__ = ["RedisCacheStore"]
