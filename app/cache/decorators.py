"""Caching decorator for async function results.

Results must be JSON-serializable; they are returned decoded from JSON on a
cache hit, so callers should cache plain data (dicts, lists) rather than
objects.
"""

import hashlib
import json
from functools import wraps
from typing import Any, Callable, TypeVar

import structlog

from app.cache.redis_client import RedisCache, RedisUnavailableError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def cache_key(*args: Any, prefix: str = "", **kwargs: Any) -> str:
    """Generate a deterministic cache key from function arguments."""
    key_data = json.dumps(
        {"args": [str(a) for a in args], "kwargs": {k: str(v) for k, v in sorted(kwargs.items())}},
        sort_keys=True,
    )
    key_hash = hashlib.md5(key_data.encode()).hexdigest()

    if prefix:
        return f"{prefix}:{key_hash}"
    return key_hash


def cached(
    ttl: int = 300,
    prefix: str = "",
    key_builder: Callable[..., str] | None = None,
):
    """Decorator to cache async function results in Redis.

    Args:
        ttl: Time-to-live in seconds (default 5 minutes)
        prefix: Key prefix for namespacing
        key_builder: Optional custom function to build cache key; receives
            the same arguments as the decorated function

    Example:
        @cached(ttl=3600, key_builder=lambda self, q, n: f"catalog:search:{q}:{n}")
        async def search_volumes(self, q: str, n: int) -> list[dict]:
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            try:
                redis_client = await RedisCache.get_client()
            except RedisUnavailableError:
                logger.debug("cache_skip_no_redis", func=func.__name__)
                return await func(*args, **kwargs)

            if key_builder:
                cache_key_str = key_builder(*args, **kwargs)
            else:
                func_prefix = f"{prefix}:{func.__name__}" if prefix else func.__name__
                cache_key_str = cache_key(*args, prefix=func_prefix, **kwargs)

            try:
                cached_value = await redis_client.get(cache_key_str)
                if cached_value is not None:
                    logger.debug("cache_hit", key=cache_key_str)
                    return json.loads(cached_value)
            except json.JSONDecodeError:
                logger.warning("cache_invalid_json", key=cache_key_str)
            except Exception as e:
                logger.warning("cache_get_error", key=cache_key_str, error=str(e))

            logger.debug("cache_miss", key=cache_key_str)
            result = await func(*args, **kwargs)

            try:
                await redis_client.setex(cache_key_str, ttl, json.dumps(result, default=str))
            except Exception as e:
                logger.warning("cache_set_error", key=cache_key_str, error=str(e))

            return result

        return wrapper

    return decorator
