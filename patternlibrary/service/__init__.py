"""Preview service for built pattern libraries."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
