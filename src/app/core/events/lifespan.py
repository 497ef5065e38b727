"""Application lifespan event handlers.

This module defines the lifespan context manager that handles:
- Application startup: connect stores, build the ranking services, warm the ranking
- Application shutdown: close connections
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from app.cache.ranking import RankingCache
from app.cache.redis import close_redis_pools, init_redis_pools
from app.core.config import Settings, get_settings
from app.database.connection import close_database_pool, init_database_pool
from app.database.repositories import RecipeRepository, ViewLogRepository
from app.observability.logging import get_logger, setup_logging
from app.services.ranking.exceptions import StoreUnavailableError
from app.services.ranking.service import RankAggregator
from app.services.views.service import ViewRecorder


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from asyncpg import Pool
    from fastapi import FastAPI
    from redis.asyncio import Redis

logger = get_logger(__name__)


def build_services(
    settings: Settings,
    cache_client: Redis[Any],
    pool: Pool,
) -> tuple[RecipeRepository, RankAggregator, ViewRecorder]:
    """Wire the ranking services onto live store connections.

    Shared by the API lifespan and the ARQ worker startup.
    """
    recipes = RecipeRepository(pool)
    aggregator = RankAggregator.from_settings(
        settings.ranking,
        view_log=ViewLogRepository(pool),
        ranking=RankingCache(cache_client, settings.ranking.cache_key),
        recipes=recipes,
    )
    recorder = ViewRecorder.from_settings(settings.views, cache_client, aggregator)
    return recipes, aggregator, recorder


async def _startup(app: FastAPI, settings: Settings) -> None:
    """Initialize all application services during startup.

    Redis and PostgreSQL are both required; failure to reach either aborts
    startup. The initial ranking rebuild is best effort.
    """
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
    )

    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        debug=settings.app.debug,
    )

    cache_client = await init_redis_pools()
    pool = await init_database_pool()

    recipes, aggregator, recorder = build_services(settings, cache_client, pool)
    app.state.recipe_repository = recipes
    app.state.rank_aggregator = aggregator
    app.state.view_recorder = recorder

    if settings.ranking.rebuild_on_startup:
        await _warm_ranking(aggregator)

    logger.info("Application startup complete")


async def _warm_ranking(aggregator: RankAggregator) -> None:
    """Populate the ranking before serving; reads fall back until it exists."""
    try:
        rebuilt = await aggregator.rebuild_window()
    except StoreUnavailableError:
        logger.exception("Initial ranking rebuild failed - serving from view log")
        return
    logger.info("Initial ranking rebuild finished", rebuilt=rebuilt)


async def _shutdown(app: FastAPI) -> None:
    """Shutdown all application services."""
    logger.info("Shutting down application")

    app.state.view_recorder = None
    app.state.rank_aggregator = None
    app.state.recipe_repository = None

    await close_database_pool()
    await close_redis_pools()

    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None - control returns to the application to handle requests.
    """
    settings = get_settings()
    await _startup(app, settings)
    try:
        yield
    finally:
        await _shutdown(app)
