"""Pydantic schemas shared by the API, services and repositories."""

from app.schemas.admin import RankingRebuildResponse
from app.schemas.base import APIResponse, DomainModel
from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.recipe import RecipeSummary, TopViewedRecipe, TopViewedRecipesResponse
from app.schemas.views import RankingEntry, RecipeViewCount, UserIdentifier, ViewEvent


__all__ = [
    "APIResponse",
    "DomainModel",
    "HealthResponse",
    "RankingEntry",
    "RankingRebuildResponse",
    "ReadinessResponse",
    "RecipeSummary",
    "RecipeViewCount",
    "TopViewedRecipe",
    "TopViewedRecipesResponse",
    "UserIdentifier",
    "ViewEvent",
]
