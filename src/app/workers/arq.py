"""ARQ worker configuration.

This module provides:
- Worker settings and configuration
- Redis and PostgreSQL connections for workers
- Startup/shutdown handlers
- Cron job scheduling
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any, ClassVar

from arq import cron
from arq.connections import RedisSettings

from app.cache.redis import close_redis_pools, init_redis_pools
from app.core.config import get_settings
from app.core.events.lifespan import build_services
from app.database.connection import close_database_pool, init_database_pool
from app.observability.logging import get_logger, setup_logging
from app.workers.tasks.ranking import rebuild_view_ranking


if TYPE_CHECKING:
    from arq.cron import CronJob


logger = get_logger(__name__)

# Type alias for ARQ worker functions
WorkerFunction = Callable[..., Coroutine[Any, Any, Any]]


async def startup(ctx: dict[str, Any]) -> None:
    """Worker startup handler.

    Connects both stores and builds the rank aggregator the tasks use.

    Args:
        ctx: Worker context dictionary for storing shared state.
    """
    settings = get_settings()

    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
    )

    logger.info(
        "ARQ worker starting",
        environment=settings.APP_ENV,
    )

    ctx["settings"] = settings

    cache_client = await init_redis_pools()
    pool = await init_database_pool()
    _, aggregator, _ = build_services(settings, cache_client, pool)
    ctx["aggregator"] = aggregator

    logger.debug("Initialized rank aggregator for worker")


async def shutdown(ctx: dict[str, Any]) -> None:
    """Worker shutdown handler.

    Args:
        ctx: Worker context dictionary containing initialized resources.
    """
    logger.info("ARQ worker shutting down")

    ctx.pop("aggregator", None)
    await close_database_pool()
    await close_redis_pools()


def get_redis_settings() -> RedisSettings:
    """Get Redis settings for ARQ.

    Returns:
        RedisSettings configured for the job queue.
    """
    settings = get_settings()

    return RedisSettings(
        host=settings.redis.host,
        port=settings.redis.port,
        username=settings.redis.user,
        password=settings.REDIS_PASSWORD or None,
        database=settings.redis.queue_db,
    )


class WorkerSettings:
    """ARQ worker settings class.

    This class is used by the arq CLI to configure the worker.
    Run with: arq app.workers.arq.WorkerSettings
    """

    redis_settings = get_redis_settings()

    # Queue and health check keys - must match Redis ACL key pattern
    queue_name = get_settings().arq.queue_name
    health_check_key = get_settings().arq.health_check_key

    on_startup = startup
    on_shutdown = shutdown

    job_timeout = 300

    max_jobs = 10

    keep_result = 3600

    max_tries = 3

    functions: ClassVar[list[WorkerFunction]] = [
        rebuild_view_ranking,
    ]

    # Guarded rebuild: a no-op while the ranking exists, repopulates it
    # shortly after the midnight expiry.
    cron_jobs: ClassVar[list[CronJob]] = [
        cron(
            rebuild_view_ranking,
            name=get_settings().arq.job_ids.ranking_rebuild,
            minute=set(get_settings().arq.rebuild_cron_minutes),
            run_at_startup=True,
            unique=True,
        ),
    ]
