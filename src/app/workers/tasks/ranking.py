"""View ranking background tasks.

This module provides ARQ tasks for:
- Rebuilding the most-viewed ranking once it has expired
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.observability.logging import get_logger
from app.services.ranking.exceptions import StoreUnavailableError


if TYPE_CHECKING:
    from app.services.ranking.service import RankAggregator

logger = get_logger(__name__)


async def rebuild_view_ranking(ctx: dict[str, Any]) -> dict[str, Any]:
    """Rebuild the view ranking from the view log if it is absent.

    Called by:
    - Cron job (every half hour, and once at worker startup)

    Args:
        ctx: ARQ worker context containing shared dependencies:
            - aggregator: RankAggregator wired to Redis and PostgreSQL

    Returns:
        Result dict with status and whether the ranking was rebuilt.
    """
    aggregator: RankAggregator | None = ctx.get("aggregator")
    if aggregator is None:
        logger.error("Rank aggregator not available in worker context")
        return {"status": "failed", "reason": "aggregator_unavailable"}

    logger.info("Starting view ranking rebuild")

    try:
        rebuilt = await aggregator.rebuild_window()
    except StoreUnavailableError as e:
        logger.exception("View ranking rebuild failed", store=e.store)
        return {"status": "failed", "reason": "store_unavailable", "store": e.store}

    logger.info("View ranking rebuild completed", rebuilt=rebuilt)
    return {"status": "completed", "rebuilt": rebuilt}
