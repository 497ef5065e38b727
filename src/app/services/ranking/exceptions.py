"""Exceptions for the recipe view ranking.

This module defines the errors raised while recording views and
reading or rebuilding the most-viewed ranking.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Iterator


class RankingError(Exception):
    """Base exception for ranking and view recording errors."""


class RecipeNotFoundError(RankingError):
    """Raised when a view targets a recipe that does not exist."""

    def __init__(self, recipe_id: int) -> None:
        self.recipe_id = recipe_id
        super().__init__(f"Recipe {recipe_id} not found")


class StoreUnavailableError(RankingError):
    """Raised when the view log or the ranking cache cannot be reached.

    The enclosing operation fails as a whole; nothing is retried here.
    """

    def __init__(self, store: str, message: str | None = None) -> None:
        self.store = store
        super().__init__(message or f"{store} is unavailable")


@contextmanager
def store_errors(store: str, *error_types: type[BaseException]) -> Iterator[None]:
    """Re-raise client-level errors from ``store`` as StoreUnavailableError."""
    try:
        yield
    except error_types as e:
        raise StoreUnavailableError(store, f"{store} is unavailable: {e}") from e
