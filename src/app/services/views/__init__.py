"""Deduplicated recipe view recording."""

from app.services.views.service import ViewRecorder


__all__ = ["ViewRecorder"]
