"""Unit tests for ARQ worker configuration."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

import app.workers.arq as arq_module
from app.services.ranking.service import RankAggregator
from app.workers.arq import WorkerSettings, get_redis_settings, shutdown, startup
from app.workers.tasks.ranking import rebuild_view_ranking


pytestmark = pytest.mark.unit


class TestWorkerSettings:
    """Tests for the WorkerSettings class."""

    def test_registers_rebuild_task(self) -> None:
        assert rebuild_view_ranking in WorkerSettings.functions

    def test_rebuild_cron_schedule(self) -> None:
        """Should schedule the rebuild on the configured minutes."""
        (job,) = WorkerSettings.cron_jobs

        assert job.coroutine is rebuild_view_ranking
        assert job.name == "recipe_view_ranking_rebuild"
        assert job.minute == {0, 30}
        assert job.run_at_startup is True

    def test_queue_uses_queue_db(self, settings: Any) -> None:
        redis_settings = get_redis_settings()

        assert redis_settings.database == settings.redis.queue_db
        assert WorkerSettings.queue_name == settings.arq.queue_name


class TestLifecycle:
    """Tests for worker startup and shutdown."""

    @pytest.mark.asyncio
    async def test_startup_builds_aggregator(self) -> None:
        ctx: dict[str, object] = {}
        cache_client = MagicMock()
        pool = MagicMock()

        with (
            patch.object(arq_module, "setup_logging"),
            patch.object(
                arq_module, "init_redis_pools", new=AsyncMock(return_value=cache_client)
            ),
            patch.object(
                arq_module, "init_database_pool", new=AsyncMock(return_value=pool)
            ),
        ):
            await startup(ctx)

        assert isinstance(ctx["aggregator"], RankAggregator)
        cache_client.register_script.assert_called_once()

    @pytest.mark.asyncio
    async def test_shutdown_closes_stores(self) -> None:
        ctx: dict[str, object] = {"aggregator": object()}

        with (
            patch.object(arq_module, "close_redis_pools", new=AsyncMock()) as close_redis,
            patch.object(arq_module, "close_database_pool", new=AsyncMock()) as close_db,
        ):
            await shutdown(ctx)

        close_redis.assert_awaited_once()
        close_db.assert_awaited_once()
        assert "aggregator" not in ctx
