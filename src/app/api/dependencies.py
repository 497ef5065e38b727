"""FastAPI dependencies for service access.

This module provides reusable dependencies for accessing application services
in FastAPI route handlers. Services are initialized during application startup
and stored in app.state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import Header, HTTPException, Request, status

from app.core.middleware.logging import get_client_ip
from app.schemas.views import UserIdentifier


if TYPE_CHECKING:
    from app.database.repositories.recipe import RecipeRepository
    from app.services.ranking.service import RankAggregator
    from app.services.views.service import ViewRecorder


async def get_rank_aggregator(request: Request) -> RankAggregator:
    """Get the rank aggregator from app state.

    Raises:
        HTTPException: 503 if service is not initialized.
    """
    aggregator: RankAggregator | None = getattr(
        request.app.state, "rank_aggregator", None
    )
    if aggregator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Ranking service not available",
        )
    return aggregator


async def get_view_recorder(request: Request) -> ViewRecorder:
    """Get the view recorder from app state.

    Raises:
        HTTPException: 503 if service is not initialized.
    """
    recorder: ViewRecorder | None = getattr(request.app.state, "view_recorder", None)
    if recorder is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="View recording service not available",
        )
    return recorder


async def get_recipe_repository(request: Request) -> RecipeRepository:
    """Get the recipe repository from app state.

    Raises:
        HTTPException: 503 if repository is not initialized.
    """
    repository: RecipeRepository | None = getattr(
        request.app.state, "recipe_repository", None
    )
    if repository is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Recipe store not available",
        )
    return repository


async def get_viewer(
    request: Request,
    x_user_id: Annotated[int | None, Header(ge=1)] = None,
) -> UserIdentifier:
    """Identify the caller for view deduplication.

    The authenticated user id is forwarded by the gateway in ``X-User-ID``;
    anonymous callers are identified by client IP. Both come from headers the
    gateway must set or strip, since callers could otherwise rotate them.
    """
    return UserIdentifier(user_id=x_user_id, ip=get_client_ip(request))
