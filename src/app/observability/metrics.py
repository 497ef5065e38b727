"""Prometheus metrics instrumentation.

This module provides:
- FastAPI automatic request metrics
- Ranking and view-recording counters
- Metrics endpoint configuration
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator, metrics

from app.core.config import get_settings
from app.observability.logging import get_logger


if TYPE_CHECKING:
    from fastapi import FastAPI

logger = get_logger(__name__)

METRIC_NAMESPACE = "recipe_views"


RANKING_READS = Counter(
    "ranking_reads_total",
    "Top-viewed reads by the store that answered them",
    ["source"],  # cache | fallback
    namespace=METRIC_NAMESPACE,
)

RANKING_REBUILDS = Counter(
    "ranking_rebuilds_total",
    "Ranking rebuild attempts by outcome",
    ["result"],  # populated | skipped | empty | lost_race
    namespace=METRIC_NAMESPACE,
)

RANKING_MISSING_RECIPES = Counter(
    "ranking_missing_recipes_total",
    "Ranked recipe ids with no metadata row, skipped from results",
    namespace=METRIC_NAMESPACE,
)

VIEWS_RECORDED = Counter(
    "views_recorded_total",
    "Recipe views persisted to the view log",
    namespace=METRIC_NAMESPACE,
)

VIEWS_DEDUPLICATED = Counter(
    "views_deduplicated_total",
    "Recipe views ignored as repeats within the dedup window",
    namespace=METRIC_NAMESPACE,
)

RANKING_INCREMENT_FAILURES = Counter(
    "ranking_increment_failures_total",
    "Ranking increments lost after the view was durably recorded",
    namespace=METRIC_NAMESPACE,
)


def setup_metrics(app: FastAPI) -> Instrumentator:
    """Configure Prometheus HTTP instrumentation and expose the endpoint.

    Args:
        app: The FastAPI application instance.

    Returns:
        Configured Instrumentator instance.
    """
    settings = get_settings()

    if not settings.observability.metrics.enabled:
        logger.info("Metrics collection disabled")
        return Instrumentator()

    prefix = settings.api.v1_prefix

    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=[
            f"{prefix}/health",
            f"{prefix}/ready",
            f"{prefix}/metrics",
        ],
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True,
    )
    instrumentator.add(
        metrics.default(
            metric_namespace=METRIC_NAMESPACE,
            metric_subsystem="http",
            should_only_respect_2xx_for_highr=False,
        )
    )
    instrumentator.instrument(app)

    metrics_endpoint = f"{prefix}/metrics"
    instrumentator.expose(
        app,
        endpoint=metrics_endpoint,
        include_in_schema=True,
        tags=["Monitoring"],
    )

    logger.info("Prometheus metrics configured", endpoint=metrics_endpoint)

    return instrumentator


__all__ = [
    "RANKING_INCREMENT_FAILURES",
    "RANKING_MISSING_RECIPES",
    "RANKING_READS",
    "RANKING_REBUILDS",
    "VIEWS_DEDUPLICATED",
    "VIEWS_RECORDED",
    "setup_metrics",
]
