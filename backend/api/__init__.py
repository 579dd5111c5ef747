"""
Tally API package.

Provides the FastAPI application for the Tally answer-checking service.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
