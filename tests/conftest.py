"""Shared test fixtures for the recipe view ranking service tests.

This module provides in-memory stand-ins for the view log, the ranking
cache and the recipe lookup, plus settings wired to the test environment.
"""

from __future__ import annotations

import os
from collections import Counter
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest


os.environ.setdefault("APP_ENV", "test")

from app.core.config import get_settings  # noqa: E402
from app.schemas.recipe import RecipeSummary  # noqa: E402
from app.schemas.views import (  # noqa: E402
    RankingEntry,
    RecipeViewCount,
    UserIdentifier,
    ViewEvent,
)
from app.services.ranking.exceptions import StoreUnavailableError  # noqa: E402
from app.services.ranking.service import RankAggregator  # noqa: E402


if TYPE_CHECKING:
    from collections.abc import Callable, Generator, Iterable, Mapping

    from app.core.config import Settings


FIXED_NOW = datetime(2026, 3, 14, 18, 30, tzinfo=UTC)


class InMemoryViewLog:
    """View log kept in a list, with per-event timestamps."""

    def __init__(self, recipe_ids: Iterable[int], clock: FixedClock) -> None:
        self.recipe_ids = set(recipe_ids)
        self.events: list[ViewEvent] = []
        self.clock = clock
        self.grouped_calls = 0
        self.fail = False

    def add_views(self, recipe_id: int, count: int, *, age: timedelta = timedelta()) -> None:
        """Seed ``count`` views of ``recipe_id`` that happened ``age`` ago."""
        for _ in range(count):
            self.events.append(
                ViewEvent(
                    id=len(self.events) + 1,
                    recipe_id=recipe_id,
                    viewer=UserIdentifier(ip="10.0.0.1"),
                    occurred_at=self.clock() - age,
                )
            )

    async def append(self, recipe_id: int, viewer: UserIdentifier) -> ViewEvent | None:
        if self.fail:
            raise StoreUnavailableError("view log")
        if recipe_id not in self.recipe_ids:
            return None
        event = ViewEvent(
            id=len(self.events) + 1,
            recipe_id=recipe_id,
            viewer=viewer,
            occurred_at=self.clock(),
        )
        self.events.append(event)
        return event

    async def grouped_count_since(
        self,
        since: datetime,
        limit: int | None = None,
    ) -> list[RecipeViewCount]:
        self.grouped_calls += 1
        if self.fail:
            raise StoreUnavailableError("view log")
        counts = Counter(e.recipe_id for e in self.events if e.occurred_at >= since)
        ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        if limit is not None:
            ordered = ordered[:limit]
        return [RecipeViewCount(recipe_id=rid, count=n) for rid, n in ordered]

    def count_since(self, since: datetime) -> dict[int, int]:
        return dict(Counter(e.recipe_id for e in self.events if e.occurred_at >= since))


class InMemoryRankingStore:
    """Sorted-set ranking held in a dict; None means the key is absent."""

    def __init__(self) -> None:
        self.scores: dict[int, int] | None = None
        self.ttl: int | None = None
        self.fail_increment = False
        self.replace_calls = 0
        self.mutations = 0

    async def exists(self) -> bool:
        return self.scores is not None

    async def increment_member(self, recipe_id: int, delta: int = 1) -> float | None:
        if self.fail_increment:
            raise StoreUnavailableError("ranking cache")
        if self.scores is None:
            return None
        self.mutations += 1
        self.scores[recipe_id] = self.scores.get(recipe_id, 0) + delta
        return float(self.scores[recipe_id])

    async def replace_if_absent(self, scores: Mapping[int, int], ttl_seconds: int) -> bool:
        self.replace_calls += 1
        if not scores or self.scores is not None:
            return False
        self.mutations += 1
        self.scores = dict(scores)
        self.ttl = ttl_seconds
        return True

    async def top_members_descending(self, k: int) -> list[RankingEntry]:
        if self.scores is None:
            return []
        ordered = sorted(self.scores.items(), key=lambda item: (-item[1], item[0]))
        return [RankingEntry(recipe_id=rid, score=score) for rid, score in ordered[:k]]

    async def expire(self, seconds: int) -> bool:
        if self.scores is None:
            return False
        self.ttl = seconds
        return True

    def expire_now(self) -> None:
        """Simulate the TTL running out."""
        self.scores = None
        self.ttl = None


class InMemoryRecipeLookup:
    def __init__(self, recipes: Iterable[RecipeSummary]) -> None:
        self.recipes = {recipe.id: recipe for recipe in recipes}
        self.calls: list[list[int]] = []

    async def get_by_ids(self, recipe_ids: Iterable[int]) -> dict[int, RecipeSummary]:
        ids = list(recipe_ids)
        self.calls.append(ids)
        return {rid: self.recipes[rid] for rid in ids if rid in self.recipes}


class FixedClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


def make_recipe(recipe_id: int, name: str | None = None) -> RecipeSummary:
    """Build a recipe summary with fixed timestamps."""
    return RecipeSummary(
        id=recipe_id,
        name=name or f"Recipe {recipe_id}",
        thumbnail=f"https://img.example.com/{recipe_id}.jpg",
        description=None,
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
        updated_at=datetime(2025, 6, 1, tzinfo=UTC),
    )


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Reload settings for every test so env overrides do not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def recipes() -> InMemoryRecipeLookup:
    return InMemoryRecipeLookup(make_recipe(rid) for rid in range(1, 11))


@pytest.fixture
def view_log(clock: FixedClock) -> InMemoryViewLog:
    return InMemoryViewLog(range(1, 11), clock)


@pytest.fixture
def ranking() -> InMemoryRankingStore:
    return InMemoryRankingStore()


@pytest.fixture
def aggregator(
    view_log: InMemoryViewLog,
    ranking: InMemoryRankingStore,
    recipes: InMemoryRecipeLookup,
    clock: FixedClock,
) -> RankAggregator:
    return RankAggregator(
        view_log,
        ranking,
        recipes,
        window_days=30,
        default_limit=5,
        max_limit=5,
        clock=clock,
    )


@pytest.fixture
def viewer() -> UserIdentifier:
    return UserIdentifier(user_id=42, ip="203.0.113.7")


@pytest.fixture
def recipe_factory() -> Callable[..., RecipeSummary]:
    """Expose ``make_recipe`` to test modules."""
    return make_recipe
