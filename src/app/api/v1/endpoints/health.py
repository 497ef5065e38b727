"""Health check endpoints.

Provides liveness and readiness probes for Kubernetes and load balancers.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import ORJSONResponse

from app.cache.redis import check_redis_health
from app.core.config import Settings, get_settings
from app.database.connection import check_database_health
from app.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Basic health check to verify the service is running.",
)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Check if the service is alive.

    Does not check external dependencies.
    """
    return HealthResponse(
        status="healthy",
        version=settings.app.version,
        environment=settings.APP_ENV,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Readiness check verifying Redis and PostgreSQL are reachable.",
    responses={503: {"model": ReadinessResponse, "description": "Not ready"}},
)
async def readiness_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ORJSONResponse:
    """Check if the service is ready to handle requests.

    Both stores are required: PostgreSQL holds the view log, Redis holds the
    ranking and the view dedup claims.
    """
    dependencies = {**await check_redis_health(), **await check_database_health()}
    ready = all(state == "healthy" for state in dependencies.values())

    body = ReadinessResponse(
        status="ready" if ready else "degraded",
        version=settings.app.version,
        environment=settings.APP_ENV,
        dependencies=dependencies,
    )
    return ORJSONResponse(
        status_code=200 if ready else 503,
        content=body.model_dump(mode="json"),
    )
