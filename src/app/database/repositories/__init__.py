"""Database repositories."""

from app.database.repositories.recipe import RecipeRepository
from app.database.repositories.view_log import ViewLogRepository


__all__ = ["RecipeRepository", "ViewLogRepository"]
