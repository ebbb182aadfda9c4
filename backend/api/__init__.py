"""
RentHub API package.

Provides the FastAPI application for profile creation, role changes and
the caller's profile.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
