"""Shared plumbing for asyncpg-backed repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING

import asyncpg

from app.database.connection import get_database_pool


if TYPE_CHECKING:
    from asyncpg import Pool

# Client-side failures that mean "the database could not answer", as opposed
# to a query returning no rows.
DATABASE_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    TimeoutError,
)


class BaseRepository:
    """Repository bound to an explicit pool or, lazily, the global one."""

    def __init__(self, pool: Pool | None = None) -> None:
        """Initialize repository with optional connection pool.

        Args:
            pool: asyncpg connection pool. If None, uses global pool.
        """
        self._pool = pool

    @property
    def pool(self) -> Pool:
        """Get the database connection pool."""
        if self._pool is not None:
            return self._pool
        return get_database_pool()
