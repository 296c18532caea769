"""Web front end and JSON API."""

from .app import build_demo_payload, create_app, run_service

__all__ = ["build_demo_payload", "create_app", "run_service"]
