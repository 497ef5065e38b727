"""Redis caching layer.

This module provides:
- Redis connection management
- The sorted-set store behind the most-viewed ranking
"""

from app.cache.ranking import RankingCache
from app.cache.redis import (
    check_redis_health,
    close_redis_pools,
    get_cache_client,
    init_redis_pools,
)


__all__ = [
    "RankingCache",
    "check_redis_health",
    "close_redis_pools",
    "get_cache_client",
    "init_redis_pools",
]
