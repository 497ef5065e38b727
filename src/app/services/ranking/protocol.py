"""Ports the rank aggregator depends on.

Production implementations live in ``app.database.repositories`` and
``app.cache.ranking``; tests substitute in-memory fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from datetime import datetime

    from app.schemas.recipe import RecipeSummary
    from app.schemas.views import (
        RankingEntry,
        RecipeViewCount,
        UserIdentifier,
        ViewEvent,
    )


@runtime_checkable
class ViewLogStore(Protocol):
    """Durable, append-only view log."""

    async def append(self, recipe_id: int, viewer: UserIdentifier) -> ViewEvent | None:
        """Persist a view; None when the recipe does not exist."""
        ...

    async def grouped_count_since(
        self,
        since: datetime,
        limit: int | None = None,
    ) -> list[RecipeViewCount]:
        """Per-recipe counts since ``since``; top ``limit`` by count if given."""
        ...


@runtime_checkable
class RankingStore(Protocol):
    """Sorted collection of recipe scores for the current window."""

    async def exists(self) -> bool: ...

    async def increment_member(self, recipe_id: int, delta: int = 1) -> float | None:
        """Bump a score while the ranking exists; None if it does not."""
        ...

    async def replace_if_absent(
        self,
        scores: Mapping[int, int],
        ttl_seconds: int,
    ) -> bool:
        """Install a full ranking with a TTL unless one exists."""
        ...

    async def top_members_descending(self, k: int) -> list[RankingEntry]: ...

    async def expire(self, seconds: int) -> bool: ...


@runtime_checkable
class RecipeLookup(Protocol):
    """Recipe metadata by id."""

    async def get_by_ids(self, recipe_ids: Iterable[int]) -> dict[int, RecipeSummary]: ...
