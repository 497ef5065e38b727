"""Background task definitions."""

from app.workers.tasks.ranking import rebuild_view_ranking


__all__ = ["rebuild_view_ranking"]
