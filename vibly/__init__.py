"""Top-level package re-exporting the API app and the profiling service."""

from __future__ import annotations

from app.main import app, create_app
from app.services.profile_service import ProfileService

__all__ = ["ProfileService", "app", "create_app"]
