"""
Profiles module interfaces.

The identity resolver only needs two narrow capabilities, reading a profile
and creating one, so they are separate protocols. IProfileService is the
full surface used by the HTTP API.
"""

from typing import Protocol, Optional, runtime_checkable

from .models import (
    CreateProfileRequest,
    CreateProfileResult,
    Profile,
    ProfileUpdate,
    RoleChangeResult,
)


@runtime_checkable
class IProfileStore(Protocol):
    """Read access to profiles by primary key."""

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        """
        Get a profile by user ID.

        Args:
            user_id: Supabase user ID (UUID)

        Returns:
            Profile if found, None otherwise

        Raises:
            ProfileLookupError: If the store could not be read
        """
        ...


@runtime_checkable
class IProfileCreator(Protocol):
    """The privileged profile creation service."""

    async def create_profile(
        self,
        request: CreateProfileRequest,
        access_token: Optional[str] = None,
    ) -> CreateProfileResult:
        """
        Create a profile, or return the existing one.

        Safe to call more than once for the same user ID: when a row
        already exists (including one inserted concurrently by another
        caller) that row is returned and nothing is written.

        Args:
            request: User ID, email, role and display name
            access_token: Caller's JWT, for implementations that call a
                remote endpoint

        Returns:
            CreateProfileResult with the stored profile

        Raises:
            ProfileCreationError: If the profile could not be created
        """
        ...


@runtime_checkable
class IProfileService(IProfileStore, IProfileCreator, Protocol):
    """Profile operations exposed to the API layer."""

    async def update_profile(self, user_id: str, update: ProfileUpdate) -> Profile:
        """
        Replace the editable fields of a profile.

        Raises:
            ProfileNotFoundError: If the user has no profile
        """
        ...

    async def promote_to_landlord(self, user_id: str) -> RoleChangeResult:
        """
        Change a user's role to landlord.

        The profile row is authoritative; the auth metadata copy is updated
        on a best-effort basis.

        Raises:
            ProfileNotFoundError: If the user has no profile
        """
        ...
