"""Most-viewed recipes ranking.

This package maintains a per-window ranking of recipes by view count,
served from Redis with a fallback to grouped counts over the view log.
"""

from app.services.ranking.exceptions import (
    RankingError,
    RecipeNotFoundError,
    StoreUnavailableError,
)
from app.services.ranking.protocol import RankingStore, RecipeLookup, ViewLogStore
from app.services.ranking.service import RankAggregator


__all__ = [
    "RankAggregator",
    "RankingError",
    "RankingStore",
    "RecipeLookup",
    "RecipeNotFoundError",
    "StoreUnavailableError",
    "ViewLogStore",
]
