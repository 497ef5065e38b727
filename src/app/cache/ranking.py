"""Redis sorted-set store for the most-viewed recipes ranking.

One key holds the whole ranking for the current window: members are recipe
ids, scores are view counts. The key carries a single TTL ending at the next
UTC midnight; once it expires the ranking is rebuilt from the view log
rather than aged in place.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

import redis.asyncio as redis

from app.observability.logging import get_logger
from app.schemas.views import RankingEntry
from app.services.ranking.exceptions import store_errors


if TYPE_CHECKING:
    from collections.abc import Mapping

    from redis.asyncio import Redis

logger = get_logger(__name__)

STORE_NAME = "ranking cache"

# Increment only a live ranking. A bare ZINCRBY on an expired key would
# recreate it as a TTL-less ranking holding just this one view, which the
# guarded rebuild would then mistake for a populated window.
_INCREMENT_IF_EXISTS = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return redis.call('ZINCRBY', KEYS[1], ARGV[1], ARGV[2])
end
return false
"""


class RankingCache:
    """Sorted-set operations on the ranking key."""

    def __init__(self, client: Redis[Any], key: str) -> None:
        self._client = client
        self._key = key
        self._increment_script = client.register_script(_INCREMENT_IF_EXISTS)

    @property
    def key(self) -> str:
        return self._key

    async def exists(self) -> bool:
        with store_errors(STORE_NAME, redis.RedisError):
            return await self._client.exists(self._key) > 0

    async def increment_member(self, recipe_id: int, delta: int = 1) -> float | None:
        """Add ``delta`` to a recipe's score while the ranking exists.

        Creates the member when the recipe is not ranked yet.

        Returns:
            The new score, or None when the ranking key is absent.
        """
        with store_errors(STORE_NAME, redis.RedisError):
            result = await self._increment_script(
                keys=[self._key], args=[delta, str(recipe_id)]
            )
        return None if result is None else float(result)

    async def replace_if_absent(
        self,
        scores: Mapping[int, int],
        ttl_seconds: int,
    ) -> bool:
        """Install a complete ranking unless one already exists.

        The scores are written to a private staging key together with the
        TTL and then moved into place with RENAMENX, so concurrent rebuilds
        can never merge into each other or into a live ranking.

        Args:
            scores: View count per recipe id.
            ttl_seconds: Lifetime of the installed ranking.

        Returns:
            True if this call installed the ranking.
        """
        if not scores:
            return False

        staging_key = f"{self._key}:staging:{uuid.uuid4().hex}"
        with store_errors(STORE_NAME, redis.RedisError):
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.zadd(
                    staging_key,
                    {str(recipe_id): count for recipe_id, count in scores.items()},
                )
                pipe.expire(staging_key, ttl_seconds)
                pipe.renamenx(staging_key, self._key)
                *_, installed = await pipe.execute()

            if not installed:
                await self._client.delete(staging_key)

        return bool(installed)

    async def top_members_descending(self, k: int) -> list[RankingEntry]:
        """Return the ``k`` highest-scored members, best first."""
        with store_errors(STORE_NAME, redis.RedisError):
            members = await self._client.zrevrange(
                self._key, 0, k - 1, withscores=True
            )
        return [
            RankingEntry(recipe_id=int(member), score=int(score))
            for member, score in members
        ]

    async def expire(self, seconds: int) -> bool:
        """Reset the ranking TTL. Returns False when the key is absent."""
        with store_errors(STORE_NAME, redis.RedisError):
            return bool(await self._client.expire(self._key, seconds))

    async def score(self, recipe_id: int) -> int | None:
        with store_errors(STORE_NAME, redis.RedisError):
            value = await self._client.zscore(self._key, str(recipe_id))
        return None if value is None else int(value)
