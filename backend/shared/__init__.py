"""
Shared infrastructure for the RentHub backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- logging_config: Root logging setup

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import (
    get_supabase_client,
    get_supabase_anon_client,
    reset_client_cache,
)
from .exceptions import (
    RentHubError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
)
from .logging_config import configure_logging
from .models import AuthenticatedUser

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "get_supabase_anon_client",
    "reset_client_cache",
    "RentHubError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "configure_logging",
    "AuthenticatedUser",
]
