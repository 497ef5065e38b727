"""Application entry point.

This module serves as the entry point for the FastAPI application.
It creates the application instance using the factory pattern.

Usage:
    # Development with auto-reload
    uvicorn app.main:app --reload

    # Background ranking rebuilds
    arq app.workers.arq.WorkerSettings
"""

from app.factory import create_app


# Create the application instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    from app.core.config import get_settings

    settings = get_settings()

    uvicorn.run(
        "app.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.is_development,
        log_level=settings.logging.level.lower(),
    )
