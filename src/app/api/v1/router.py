"""API v1 router aggregating all endpoint routers.

All endpoints are mounted under /api/v1/recipes-service/ via the v1_prefix configuration.
"""

from __future__ import annotations

from fastapi import APIRouter

from app.api.v1.endpoints import admin, health, recipes


router = APIRouter()

router.include_router(health.router)
router.include_router(recipes.router)
router.include_router(admin.router)
