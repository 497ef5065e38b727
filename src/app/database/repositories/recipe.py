"""Recipe metadata repository.

Read-only lookups used to decorate ranking entries. Recipe writes belong to
the recipe management side of the platform.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.database.repositories.base import DATABASE_ERRORS, BaseRepository
from app.schemas.recipe import RecipeSummary
from app.services.ranking.exceptions import store_errors


if TYPE_CHECKING:
    from collections.abc import Iterable

    from asyncpg import Record

STORE_NAME = "recipe store"

_RECIPE_COLUMNS = "id, name, thumbnail, description, created_at, updated_at"


class RecipeRepository(BaseRepository):
    """Repository for recipe metadata."""

    async def get_by_id(self, recipe_id: int) -> RecipeSummary | None:
        """Fetch one recipe, or None when it does not exist."""
        query = f"SELECT {_RECIPE_COLUMNS} FROM recipes WHERE id = $1"

        with store_errors(STORE_NAME, *DATABASE_ERRORS):
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(query, recipe_id)

        return None if row is None else self._row_to_summary(row)

    async def get_by_ids(self, recipe_ids: Iterable[int]) -> dict[int, RecipeSummary]:
        """Fetch many recipes in one round trip.

        Returns:
            Mapping of id to recipe; ids with no row are simply absent.
        """
        ids = list(dict.fromkeys(recipe_ids))
        if not ids:
            return {}

        query = f"SELECT {_RECIPE_COLUMNS} FROM recipes WHERE id = ANY($1::bigint[])"

        with store_errors(STORE_NAME, *DATABASE_ERRORS):
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(query, ids)

        return {row["id"]: self._row_to_summary(row) for row in rows}

    @staticmethod
    def _row_to_summary(row: Record) -> RecipeSummary:
        return RecipeSummary(
            id=row["id"],
            name=row["name"],
            thumbnail=row["thumbnail"],
            description=row["description"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
