"""Cache package for Redis-based caching."""

from app.cache.decorators import cache_key, cached
from app.cache.redis_client import RedisCache, RedisUnavailableError

__all__ = ["RedisCache", "RedisUnavailableError", "cached", "cache_key"]
