"""Unit tests for the recipe metadata repository."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import asyncpg
import pytest

import app.database.connection as db_module
from app.database.repositories.recipe import RecipeRepository
from app.services.ranking.exceptions import StoreUnavailableError


pytestmark = pytest.mark.unit


def _row(recipe_id: int) -> dict[str, Any]:
    return {
        "id": recipe_id,
        "name": f"Recipe {recipe_id}",
        "thumbnail": None,
        "description": "Tasty",
        "created_at": datetime(2025, 1, 1, tzinfo=UTC),
        "updated_at": datetime(2025, 1, 2, tzinfo=UTC),
    }


class TestGetById:
    """Tests for RecipeRepository.get_by_id."""

    @pytest.mark.asyncio
    async def test_returns_summary(self, mock_pool: MagicMock, mock_conn: AsyncMock) -> None:
        mock_conn.fetchrow.return_value = _row(4)

        recipe = await RecipeRepository(mock_pool).get_by_id(4)

        assert recipe is not None
        assert recipe.id == 4
        assert recipe.name == "Recipe 4"
        assert mock_conn.fetchrow.call_args.args[1] == 4

    @pytest.mark.asyncio
    async def test_returns_none_when_missing(self, mock_pool: MagicMock) -> None:
        assert await RecipeRepository(mock_pool).get_by_id(4) is None

    @pytest.mark.asyncio
    async def test_uses_global_pool_by_default(self, mock_pool: MagicMock) -> None:
        db_module._pool = mock_pool

        assert await RecipeRepository().get_by_id(4) is None
        mock_pool.acquire.assert_called_once()


class TestGetByIds:
    """Tests for RecipeRepository.get_by_ids."""

    @pytest.mark.asyncio
    async def test_fetches_in_one_query(
        self, mock_pool: MagicMock, mock_conn: AsyncMock
    ) -> None:
        """Should query once with deduplicated ids and map by id."""
        mock_conn.fetch.return_value = [_row(3), _row(1)]

        result = await RecipeRepository(mock_pool).get_by_ids([1, 3, 1, 8])

        mock_conn.fetch.assert_awaited_once()
        assert mock_conn.fetch.call_args.args[1] == [1, 3, 8]
        assert set(result) == {1, 3}
        assert result[3].name == "Recipe 3"

    @pytest.mark.asyncio
    async def test_empty_ids_skip_query(
        self, mock_pool: MagicMock, mock_conn: AsyncMock
    ) -> None:
        assert await RecipeRepository(mock_pool).get_by_ids([]) == {}
        mock_conn.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_wraps_database_errors(
        self, mock_pool: MagicMock, mock_conn: AsyncMock
    ) -> None:
        mock_conn.fetch.side_effect = asyncpg.InterfaceError("pool closed")

        with pytest.raises(StoreUnavailableError) as exc_info:
            await RecipeRepository(mock_pool).get_by_ids([1])

        assert exc_info.value.store == "recipe store"
