"""Admin endpoint schemas."""

from __future__ import annotations

from pydantic import Field

from app.schemas.base import APIResponse


class RankingRebuildResponse(APIResponse):
    """Outcome of a manual ranking rebuild."""

    rebuilt: bool = Field(
        ...,
        description="True when the ranking was repopulated; false when it already existed",
    )
