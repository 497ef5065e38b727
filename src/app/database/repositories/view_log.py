"""Recipe view log repository.

The view log is append-only and is the source of truth for view counts.
Every row is one counted view; the ranking cache is derived from it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.database.repositories.base import DATABASE_ERRORS, BaseRepository
from app.observability.logging import get_logger
from app.schemas.views import RecipeViewCount, UserIdentifier, ViewEvent
from app.services.ranking.exceptions import store_errors


if TYPE_CHECKING:
    from datetime import datetime

    from asyncpg import Record

logger = get_logger(__name__)

STORE_NAME = "view log"

# Bumping the recipe's lifetime counter doubles as the existence check: no
# recipe row means nothing to insert, and the statement returns no row.
_APPEND_QUERY = """
    WITH bumped AS (
        UPDATE recipes
        SET view_count = view_count + 1
        WHERE id = $1
        RETURNING id
    )
    INSERT INTO recipe_view_logs (recipe_id, user_id, user_ip)
    SELECT id, $2, $3 FROM bumped
    RETURNING id, recipe_id, user_id, user_ip, created_at
"""

_GROUPED_COUNT_QUERY = """
    SELECT recipe_id, COUNT(*) AS view_count
    FROM recipe_view_logs
    WHERE created_at >= $1
    GROUP BY recipe_id
"""


class ViewLogRepository(BaseRepository):
    """Repository for the durable recipe view log."""

    async def append(self, recipe_id: int, viewer: UserIdentifier) -> ViewEvent | None:
        """Persist one view.

        Args:
            recipe_id: Viewed recipe.
            viewer: Who viewed it.

        Returns:
            The stored event, or None when the recipe does not exist.
        """
        with store_errors(STORE_NAME, *DATABASE_ERRORS):
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    _APPEND_QUERY, recipe_id, viewer.user_id, viewer.ip
                )

        if row is None:
            return None
        return self._row_to_event(row)

    async def grouped_count_since(
        self,
        since: datetime,
        limit: int | None = None,
    ) -> list[RecipeViewCount]:
        """Count views per recipe from ``since`` onward.

        Args:
            since: Inclusive lower bound on the view timestamp.
            limit: When given, only the ``limit`` most viewed recipes,
                highest count first.

        Returns:
            One entry per recipe with at least one view in range.
        """
        query = _GROUPED_COUNT_QUERY
        args: list[object] = [since]
        if limit is not None:
            query += " ORDER BY view_count DESC, recipe_id LIMIT $2"
            args.append(limit)

        with store_errors(STORE_NAME, *DATABASE_ERRORS):
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(query, *args)

        return [
            RecipeViewCount(recipe_id=row["recipe_id"], count=row["view_count"])
            for row in rows
        ]

    @staticmethod
    def _row_to_event(row: Record) -> ViewEvent:
        return ViewEvent(
            id=row["id"],
            recipe_id=row["recipe_id"],
            viewer=UserIdentifier(user_id=row["user_id"], ip=row["user_ip"]),
            occurred_at=row["created_at"],
        )
