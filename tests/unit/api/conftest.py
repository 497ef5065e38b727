"""API unit test fixtures.

The app is built without its lifespan; services are placed on app.state
directly and backed by the in-memory stores from the root conftest.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from app.api.dependencies import get_recipe_repository
from app.factory import create_app
from app.services.views.service import ViewRecorder


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI


@asynccontextmanager
async def _no_lifespan(_: FastAPI) -> AsyncGenerator[None]:
    yield


@pytest.fixture
def claimed_keys() -> set[str]:
    return set()


@pytest.fixture
def dedup_client(claimed_keys: set[str]) -> MagicMock:
    """Redis stand-in honouring SET NX for the dedup keys."""

    async def _set(key: str, value: str, *, nx: bool, ex: int) -> bool | None:
        if key in claimed_keys:
            return None
        claimed_keys.add(key)
        return True

    async def _delete(key: str) -> int:
        claimed_keys.discard(key)
        return 1

    client = MagicMock()
    client.set = AsyncMock(side_effect=_set)
    client.delete = AsyncMock(side_effect=_delete)
    return client


@pytest.fixture
def recipe_repository(recipes: Any) -> MagicMock:
    repository = MagicMock()

    async def _get_by_id(recipe_id: int) -> Any:
        return recipes.recipes.get(recipe_id)

    repository.get_by_id = AsyncMock(side_effect=_get_by_id)
    return repository


@pytest.fixture
def app(
    settings: Any,
    aggregator: Any,
    dedup_client: MagicMock,
    recipe_repository: MagicMock,
) -> FastAPI:
    application = create_app(settings, lifespan_handler=_no_lifespan)
    application.state.rank_aggregator = aggregator
    application.state.view_recorder = ViewRecorder.from_settings(
        settings.views, dedup_client, aggregator
    )
    application.dependency_overrides[get_recipe_repository] = lambda: recipe_repository
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def prefix(settings: Any) -> str:
    return settings.api.v1_prefix
