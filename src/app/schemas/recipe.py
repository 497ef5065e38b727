"""Recipe schemas for the view and ranking endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from app.schemas.base import APIResponse


class RecipeSummary(APIResponse):
    """Recipe metadata shown in listings."""

    id: int = Field(..., description="Recipe identifier")
    name: str = Field(..., description="Recipe name")
    thumbnail: str | None = Field(default=None, description="Thumbnail image URL")
    description: str | None = Field(default=None, description="Short description")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class TopViewedRecipe(APIResponse):
    """A ranked recipe with its view count for the trailing window."""

    recipe: RecipeSummary
    score: int = Field(..., ge=0, description="Views in the ranking window")


class TopViewedRecipesResponse(APIResponse):
    """Most viewed recipes, highest score first."""

    recipes: list[TopViewedRecipe] = Field(default_factory=list)
    window_days: int = Field(..., description="Length of the ranking window")
