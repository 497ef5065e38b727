"""Admin endpoints for system management operations.

Provides:
- POST /admin/ranking/rebuild for repopulating an absent view ranking
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.dependencies import get_rank_aggregator
from app.observability.logging import get_logger
from app.schemas.admin import RankingRebuildResponse
from app.services.ranking.service import RankAggregator  # noqa: TC001


logger = get_logger(__name__)

router = APIRouter(tags=["Admin"])


@router.post(
    "/admin/ranking/rebuild",
    response_model=RankingRebuildResponse,
    summary="Rebuild the view ranking",
    description=(
        "Repopulates the most-viewed ranking from the view log if it is "
        "currently absent. An existing ranking is left untouched."
    ),
    responses={
        200: {
            "description": "Rebuild finished",
            "content": {"application/json": {"example": {"rebuilt": True}}},
        },
        503: {
            "description": "View log or ranking cache unavailable",
            "content": {
                "application/json": {
                    "example": {
                        "error": "SERVICE_UNAVAILABLE",
                        "message": "ranking cache is temporarily unavailable",
                    }
                }
            },
        },
    },
)
async def rebuild_ranking(
    aggregator: Annotated[RankAggregator, Depends(get_rank_aggregator)],
) -> RankingRebuildResponse:
    """Run a guarded ranking rebuild inline."""
    logger.info("Ranking rebuild requested")
    rebuilt = await aggregator.rebuild_window()
    return RankingRebuildResponse(rebuilt=rebuilt)
