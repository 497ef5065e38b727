"""Background job workers using ARQ."""

from app.workers.arq import WorkerSettings, get_redis_settings


__all__ = [
    "WorkerSettings",
    "get_redis_settings",
]
