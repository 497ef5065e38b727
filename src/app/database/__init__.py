"""PostgreSQL database layer.

This module provides:
- Connection pool management
- Repositories for recipe metadata and the view log
- Health check utilities
"""

from app.database.connection import (
    check_database_health,
    close_database_pool,
    get_database_pool,
    init_database_pool,
)
from app.database.repositories import RecipeRepository, ViewLogRepository


__all__ = [
    "RecipeRepository",
    "ViewLogRepository",
    "check_database_health",
    "close_database_pool",
    "get_database_pool",
    "init_database_pool",
]
