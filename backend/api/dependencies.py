"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.resolver import IdentityResolver
    from modules.profiles.interfaces import IProfileService
    from modules.profiles.repository import ProfileRepository


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use reset() to clear them for testing.
    """

    def __init__(self) -> None:
        self._profile_repository: "ProfileRepository | None" = None
        self._profile_service: "IProfileService | None" = None
        self._identity_resolver: "IdentityResolver | None" = None

    @property
    def profile_repository(self) -> "ProfileRepository":
        """Get the profile repository (service-role client)."""
        if self._profile_repository is None:
            from modules.profiles.repository import ProfileRepository
            from shared.database import get_supabase_client
            self._profile_repository = ProfileRepository(get_supabase_client())
        return self._profile_repository

    @property
    def profiles(self) -> "IProfileService":
        """Get the profile service instance."""
        if self._profile_service is None:
            from modules.profiles.service import ProfileService
            self._profile_service = ProfileService(self.profile_repository)
        return self._profile_service

    @property
    def identity_resolver(self) -> "IdentityResolver":
        """
        Get an identity resolver that creates profiles in-process.

        Server-side code already holds the service role, so it skips the
        HTTP hop that clients use.
        """
        if self._identity_resolver is None:
            from modules.auth.resolver import IdentityResolver
            self._identity_resolver = IdentityResolver(store=self.profiles, creator=self.profiles)
        return self._identity_resolver

    def reset(self) -> None:
        """Reset all cached services."""
        self._profile_repository = None
        self._profile_service = None
        self._identity_resolver = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() creates a fresh container.
    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_profile_service() -> "IProfileService":
    """FastAPI dependency for profile service."""
    return get_container().profiles


def get_identity_resolver() -> "IdentityResolver":
    """FastAPI dependency for the identity resolver."""
    return get_container().identity_resolver
