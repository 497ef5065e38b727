"""Application lifecycle events."""

from app.core.events.lifespan import build_services, lifespan

__all__ = ["build_services", "lifespan"]
