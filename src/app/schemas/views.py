"""Recipe view and ranking value objects."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from app.schemas.base import DomainModel


class UserIdentifier(DomainModel):
    """Who viewed a recipe: an authenticated user id, else the client IP."""

    user_id: int | None = Field(default=None, ge=1)
    ip: str

    @property
    def dedup_identity(self) -> str:
        """Identity used to collapse repeat views."""
        return str(self.user_id) if self.user_id is not None else self.ip


class ViewEvent(DomainModel):
    """A single persisted recipe view."""

    id: int
    recipe_id: int
    viewer: UserIdentifier
    occurred_at: datetime


class RankingEntry(DomainModel):
    """One member of the cached ranking."""

    recipe_id: int
    score: int = Field(ge=0)


class RecipeViewCount(DomainModel):
    """Grouped view count for a recipe over a time range."""

    recipe_id: int
    count: int = Field(ge=0)
