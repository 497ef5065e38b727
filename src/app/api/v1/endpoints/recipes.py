"""Recipe endpoints.

Provides:
- GET /recipes/top-viewed for the most viewed recipes over the ranking window
- GET /recipes/{recipeId} for recipe details, recording a deduplicated view
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.api.dependencies import (
    get_rank_aggregator,
    get_recipe_repository,
    get_view_recorder,
    get_viewer,
)
from app.core.exceptions import NotFoundException
from app.database.repositories.recipe import RecipeRepository  # noqa: TC001
from app.observability.logging import get_logger
from app.schemas.recipe import RecipeSummary, TopViewedRecipesResponse
from app.schemas.views import UserIdentifier  # noqa: TC001
from app.services.ranking.service import RankAggregator  # noqa: TC001
from app.services.views.service import ViewRecorder  # noqa: TC001


logger = get_logger(__name__)

router = APIRouter(tags=["Recipes"])


# Registered before /recipes/{recipeId} so "top-viewed" is not parsed as an id.
@router.get(
    "/recipes/top-viewed",
    response_model=TopViewedRecipesResponse,
    summary="Most viewed recipes",
    description=(
        "Returns the most viewed recipes over the trailing ranking window, "
        "highest view count first. Requests above the configured maximum "
        "are capped."
    ),
)
async def get_top_viewed_recipes(
    aggregator: Annotated[RankAggregator, Depends(get_rank_aggregator)],
    limit: Annotated[
        int | None,
        Query(ge=1, description="Number of recipes to return"),
    ] = None,
) -> TopViewedRecipesResponse:
    """List the most viewed recipes."""
    recipes = await aggregator.top_viewed(limit)
    return TopViewedRecipesResponse(
        recipes=recipes,
        window_days=aggregator.window_days,
    )


@router.get(
    "/recipes/{recipeId}",
    response_model=RecipeSummary,
    summary="Get a recipe",
    description=(
        "Returns recipe details and records a view for the caller. Repeat "
        "views by the same caller within the dedup window are not counted."
    ),
    responses={
        404: {"description": "Recipe not found"},
        503: {"description": "View log or ranking cache unavailable"},
    },
)
async def get_recipe(
    recipe_id: Annotated[int, Path(alias="recipeId", ge=1)],
    repository: Annotated[RecipeRepository, Depends(get_recipe_repository)],
    recorder: Annotated[ViewRecorder, Depends(get_view_recorder)],
    viewer: Annotated[UserIdentifier, Depends(get_viewer)],
) -> RecipeSummary:
    """Fetch a recipe and count the view."""
    recipe = await repository.get_by_id(recipe_id)
    if recipe is None:
        raise NotFoundException("Recipe", recipe_id)

    recorded = await recorder.record(recipe_id, viewer)
    logger.debug("Recipe viewed", recipe_id=recipe_id, recorded=recorded)
    return recipe
