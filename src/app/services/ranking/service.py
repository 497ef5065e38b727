"""Most-viewed recipes ranking.

The ranking answers "top recipes by views over the trailing window" from a
Redis sorted set and falls back to grouped counts over the view log when the
set is absent (cold start, or after its midnight expiry). The view log is
the source of truth; the sorted set is rebuilt from it once per UTC day and
incremented in place for every recorded view in between.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.observability.logging import get_logger
from app.observability.metrics import (
    RANKING_INCREMENT_FAILURES,
    RANKING_MISSING_RECIPES,
    RANKING_READS,
    RANKING_REBUILDS,
    VIEWS_RECORDED,
)
from app.schemas.recipe import TopViewedRecipe
from app.schemas.views import RankingEntry
from app.services.ranking.exceptions import RecipeNotFoundError, StoreUnavailableError
from app.services.ranking.window import (
    seconds_until_next_utc_midnight,
    utcnow,
    window_start,
)


if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from app.core.config.settings import RankingSettings
    from app.schemas.views import UserIdentifier, ViewEvent
    from app.services.ranking.protocol import RankingStore, RecipeLookup, ViewLogStore

logger = get_logger(__name__)


class RankAggregator:
    """Maintains and serves the top-viewed recipes ranking.

    Ranking key lifecycle: ABSENT -> rebuild_window -> POPULATED -> TTL
    expiry -> ABSENT. record_view mutates a POPULATED ranking in place and
    never creates one.
    """

    def __init__(
        self,
        view_log: ViewLogStore,
        ranking: RankingStore,
        recipes: RecipeLookup,
        *,
        window_days: int = 30,
        default_limit: int = 5,
        max_limit: int = 5,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the aggregator.

        Args:
            view_log: Durable view log (source of truth).
            ranking: Sorted-set ranking cache.
            recipes: Recipe metadata lookup.
            window_days: Length of the trailing window.
            default_limit: Entries returned when no limit is requested.
            max_limit: Ceiling applied to any requested limit.
            clock: Returns the current aware UTC time.
        """
        self._view_log = view_log
        self._ranking = ranking
        self._recipes = recipes
        self._window_days = window_days
        self._default_limit = min(default_limit, max_limit)
        self._max_limit = max_limit
        self._clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: RankingSettings,
        view_log: ViewLogStore,
        ranking: RankingStore,
        recipes: RecipeLookup,
    ) -> RankAggregator:
        return cls(
            view_log,
            ranking,
            recipes,
            window_days=settings.window_days,
            default_limit=settings.default_limit,
            max_limit=settings.max_limit,
        )

    @property
    def window_days(self) -> int:
        return self._window_days

    async def record_view(self, recipe_id: int, viewer: UserIdentifier) -> ViewEvent:
        """Persist a view, then count it in the live ranking.

        The view log write happens first and is authoritative: if it fails,
        or the recipe does not exist, the ranking is left untouched. A
        ranking failure after the write is logged and not raised; the next
        rebuild restores the count from the log.

        Raises:
            RecipeNotFoundError: The recipe does not exist.
            StoreUnavailableError: The view log could not be written.
        """
        event = await self._view_log.append(recipe_id, viewer)
        if event is None:
            raise RecipeNotFoundError(recipe_id)
        VIEWS_RECORDED.inc()

        try:
            score = await self._ranking.increment_member(recipe_id)
        except StoreUnavailableError:
            RANKING_INCREMENT_FAILURES.inc()
            logger.exception(
                "Ranking increment lost after view was recorded",
                recipe_id=recipe_id,
                view_id=event.id,
            )
        else:
            if score is None:
                logger.debug(
                    "Ranking absent, view will be counted by next rebuild",
                    recipe_id=recipe_id,
                )

        return event

    async def rebuild_window(self) -> bool:
        """Populate the ranking from the view log if it is absent.

        Safe to call repeatedly and concurrently: an existing ranking is
        left alone, and of several concurrent rebuilds only one installs
        its result. An empty window leaves the ranking absent.

        Returns:
            True if this call installed a ranking.
        """
        if await self._ranking.exists():
            RANKING_REBUILDS.labels(result="skipped").inc()
            logger.debug("Ranking already populated, rebuild skipped")
            return False

        now = self._clock()
        counts = await self._view_log.grouped_count_since(
            window_start(now, self._window_days)
        )
        if not counts:
            RANKING_REBUILDS.labels(result="empty").inc()
            logger.info(
                "No views in ranking window, ranking left absent",
                window_days=self._window_days,
            )
            return False

        ttl = seconds_until_next_utc_midnight(now)
        installed = await self._ranking.replace_if_absent(
            {count.recipe_id: count.count for count in counts}, ttl
        )

        RANKING_REBUILDS.labels(result="populated" if installed else "lost_race").inc()
        logger.info(
            "Ranking rebuilt" if installed else "Ranking installed concurrently, rebuild discarded",
            recipes=len(counts),
            ttl_seconds=ttl,
        )
        return installed

    async def top_viewed(self, limit: int | None = None) -> list[TopViewedRecipe]:
        """Most viewed recipes in the window, highest score first.

        Served from the ranking when present, otherwise computed from the
        view log without populating the ranking. Both paths return the same
        shape. Recipes that no longer have metadata are skipped.

        Args:
            limit: Number of entries wanted, capped at ``max_limit``.

        Raises:
            ValueError: If ``limit`` is below 1.
        """
        if limit is None:
            limit = self._default_limit
        if limit < 1:
            msg = f"limit must be at least 1, got {limit}"
            raise ValueError(msg)
        k = min(limit, self._max_limit)

        # Redis drops empty sorted sets, so no members means no ranking.
        entries = await self._ranking.top_members_descending(k)
        source = "cache"
        if not entries:
            source = "fallback"
            counts = await self._view_log.grouped_count_since(
                window_start(self._clock(), self._window_days), limit=k
            )
            entries = [
                RankingEntry(recipe_id=count.recipe_id, score=count.count)
                for count in counts
            ]

        RANKING_READS.labels(source=source).inc()
        logger.debug("Top viewed recipes read", source=source, entries=len(entries))
        return await self._resolve(entries)

    async def _resolve(self, entries: list[RankingEntry]) -> list[TopViewedRecipe]:
        if not entries:
            return []

        recipes = await self._recipes.get_by_ids(entry.recipe_id for entry in entries)

        ranked: list[TopViewedRecipe] = []
        for entry in entries:
            recipe = recipes.get(entry.recipe_id)
            if recipe is None:
                RANKING_MISSING_RECIPES.inc()
                logger.warning(
                    "Ranked recipe has no metadata, skipping",
                    recipe_id=entry.recipe_id,
                    score=entry.score,
                )
                continue
            ranked.append(TopViewedRecipe(recipe=recipe, score=entry.score))
        return ranked
