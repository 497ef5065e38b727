"""Redis client and connection pool management.

This module provides:
- Async Redis connection pool for the ranking and view-dedup keys
- Connection lifecycle management via lifespan events
- Health checks for the readiness probe
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from app.core.config import get_settings
from app.observability.logging import get_logger


if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)

_cache_pool: ConnectionPool | None = None
_cache_client: Redis[Any] | None = None


async def init_redis_pools() -> Redis[Any]:
    """Initialize the cache connection pool and verify it with a PING.

    Should be called during application startup (lifespan).

    Returns:
        The connected cache client.
    """
    global _cache_pool, _cache_client  # noqa: PLW0603

    settings = get_settings()

    logger.info(
        "Initializing Redis connections",
        host=settings.redis.host,
        port=settings.redis.port,
        db=settings.redis.cache_db,
    )

    _cache_pool = ConnectionPool.from_url(
        settings.redis_cache_url,
        max_connections=20,
        decode_responses=True,
        socket_timeout=settings.redis.socket_timeout,
        socket_connect_timeout=settings.redis.socket_timeout,
    )
    _cache_client = redis.Redis(connection_pool=_cache_pool)

    try:
        await _cache_client.ping()
        logger.info("Redis connections established successfully")
    except redis.ConnectionError:
        logger.exception("Failed to connect to Redis")
        raise

    return _cache_client


async def close_redis_pools() -> None:
    """Close the cache connection pool.

    Should be called during application shutdown (lifespan).
    """
    global _cache_pool, _cache_client  # noqa: PLW0603

    logger.info("Closing Redis connections")

    if _cache_client:
        await _cache_client.aclose()
        _cache_client = None

    if _cache_pool:
        await _cache_pool.disconnect()
        _cache_pool = None

    logger.info("Redis connections closed")


def get_cache_client() -> Redis[Any]:
    """Get the cache Redis client.

    Raises:
        RuntimeError: If Redis is not initialized.
    """
    if _cache_client is None:
        msg = "Redis cache client not initialized. Call init_redis_pools() first."
        raise RuntimeError(msg)
    return _cache_client


async def check_redis_health() -> dict[str, str]:
    """Check health of the cache connection.

    Returns:
        Mapping of ``redis`` to healthy, unhealthy or not_initialized.
    """
    if _cache_client is None:
        return {"redis": "not_initialized"}

    try:
        await _cache_client.ping()
    except redis.RedisError:
        return {"redis": "unhealthy"}
    return {"redis": "healthy"}
