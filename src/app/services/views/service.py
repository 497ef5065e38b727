"""Deduplicated recipe view recording.

A viewer counts once per recipe per dedup window. The claim is a Redis
``SET NX EX`` on a key built from the recipe id and the viewer identity;
only the request that creates the key records the view.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import redis.asyncio as redis

from app.observability.logging import get_logger
from app.observability.metrics import VIEWS_DEDUPLICATED
from app.services.ranking.exceptions import store_errors


if TYPE_CHECKING:
    from redis.asyncio import Redis

    from app.core.config.settings import ViewsSettings
    from app.schemas.views import UserIdentifier
    from app.services.ranking.service import RankAggregator

logger = get_logger(__name__)

STORE_NAME = "view dedup cache"


class ViewRecorder:
    """Records recipe views, ignoring repeats inside the dedup window."""

    def __init__(
        self,
        cache_client: Redis[Any],
        aggregator: RankAggregator,
        *,
        key_prefix: str = "recipe-view",
        ttl_seconds: int = 3600,
    ) -> None:
        self._client = cache_client
        self._aggregator = aggregator
        self._key_prefix = key_prefix
        self._ttl_seconds = ttl_seconds

    @classmethod
    def from_settings(
        cls,
        settings: ViewsSettings,
        cache_client: Redis[Any],
        aggregator: RankAggregator,
    ) -> ViewRecorder:
        return cls(
            cache_client,
            aggregator,
            key_prefix=settings.dedup_key_prefix,
            ttl_seconds=settings.dedup_ttl,
        )

    def dedup_key(self, recipe_id: int, viewer: UserIdentifier) -> str:
        return f"{self._key_prefix}:{recipe_id}-{viewer.dedup_identity}"

    async def record(self, recipe_id: int, viewer: UserIdentifier) -> bool:
        """Record a view unless this viewer already viewed the recipe recently.

        If recording fails the claim is released, so a retry by the same
        viewer is not swallowed as a duplicate.

        Returns:
            True if the view was recorded, False if it was a repeat.

        Raises:
            RecipeNotFoundError: The recipe does not exist.
            StoreUnavailableError: The dedup cache or view log is unreachable.
        """
        key = self.dedup_key(recipe_id, viewer)

        with store_errors(STORE_NAME, redis.RedisError):
            claimed = await self._client.set(key, "1", nx=True, ex=self._ttl_seconds)

        if not claimed:
            VIEWS_DEDUPLICATED.inc()
            logger.debug("Repeat view ignored", recipe_id=recipe_id)
            return False

        try:
            await self._aggregator.record_view(recipe_id, viewer)
        except Exception:
            try:
                await self._client.delete(key)
            except redis.RedisError:
                logger.exception("Failed to release view claim", key=key)
            raise

        return True
