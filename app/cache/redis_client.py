"""Redis client for caching.

Redis is optional: when it is down every caller falls back to the uncached
path, and reconnect attempts are throttled so a dead Redis does not add a
connect timeout to every request.
"""

import time

import redis.asyncio as redis
import structlog

from app.config import settings

logger = structlog.get_logger(__name__)

RECONNECT_BACKOFF_SECONDS = 30.0


class RedisUnavailableError(Exception):
    """Redis could not be reached (or a recent attempt failed)."""


class RedisCache:
    """Async Redis client singleton with connection management."""

    _client: redis.Redis | None = None
    _pool: redis.ConnectionPool | None = None
    _retry_at: float = 0.0

    @classmethod
    async def get_client(cls) -> redis.Redis:
        """Get or create the Redis client.

        Lazy initialization - only connects when first used.

        Raises:
            RedisUnavailableError: If Redis is unreachable or in backoff
        """
        if cls._client is not None:
            return cls._client

        if time.monotonic() < cls._retry_at:
            raise RedisUnavailableError("Redis connection in backoff")

        try:
            cls._pool = redis.ConnectionPool.from_url(
                str(settings.redis_url),
                encoding="utf-8",
                decode_responses=True,
                max_connections=10,
                socket_connect_timeout=1.0,
            )
            client = redis.Redis(connection_pool=cls._pool)
            await client.ping()
        except Exception as e:
            cls._retry_at = time.monotonic() + RECONNECT_BACKOFF_SECONDS
            cls._pool = None
            logger.warning("redis_connection_failed", error=str(e), retry_in=RECONNECT_BACKOFF_SECONDS)
            raise RedisUnavailableError(str(e)) from e

        cls._client = client
        logger.info("redis_connected", host=settings.redis_url.host)
        return cls._client

    @classmethod
    async def close(cls) -> None:
        """Close Redis connection and cleanup."""
        if cls._client:
            await cls._client.aclose()
            cls._client = None
            logger.info("redis_disconnected")

        if cls._pool:
            await cls._pool.disconnect()
            cls._pool = None

    @classmethod
    def is_connected(cls) -> bool:
        """Check if Redis client is connected."""
        return cls._client is not None
