"""
Profile service implementation.

Runs with the service-role Supabase client, so it is the privileged
Profile Creation Service as well as the backend for profile edits and
role changes.

The Supabase client is synchronous, so repository calls run in a worker
thread and never block the event loop.
"""

import asyncio
import logging
from typing import Optional

from .interfaces import IProfileService
from .models import (
    CreateProfileRequest,
    CreateProfileResult,
    Profile,
    ProfileUpdate,
    RoleChangeResult,
    UserRole,
)
from .repository import ProfileRepository
from .exceptions import (
    ProfileCreationError,
    ProfileLookupError,
    ProfileNotFoundError,
    ProfileStoreError,
)

logger = logging.getLogger(__name__)


class ProfileService(IProfileService):
    """Profile operations backed by the ``profiles`` table."""

    def __init__(self, repository: ProfileRepository):
        self._repository = repository

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        """Get a profile by user ID, None if it does not exist."""
        try:
            return await asyncio.to_thread(self._repository.get_by_id, user_id)
        except ProfileStoreError as e:
            logger.error("Error fetching profile for user %s: %s", user_id, e.message)
            raise ProfileLookupError(user_id, e.message) from e

    async def create_profile(
        self,
        request: CreateProfileRequest,
        access_token: Optional[str] = None,
    ) -> CreateProfileResult:
        """
        Create a profile unless one exists.

        The existence check avoids a write in the common case. The insert
        itself ignores duplicates, and the row is always read back, so a
        concurrent creator's row is returned instead of an error.
        """
        user_id = request.user_id
        try:
            existing = await asyncio.to_thread(self._repository.get_by_id, user_id)
            if existing is not None:
                logger.info("Profile already exists for user %s", user_id)
                return CreateProfileResult(profile=existing, created=False)

            logger.info("Creating profile for user %s with role %s", user_id, request.role.value)
            row = ProfileRepository.build_row(
                user_id,
                request.email,
                request.role,
                request.default_display_name(),
            )
            inserted = await asyncio.to_thread(self._repository.insert_if_absent, row)
            profile = await asyncio.to_thread(self._repository.get_by_id, user_id)
        except ProfileStoreError as e:
            logger.error("Error creating profile for user %s: %s", user_id, e.message)
            raise ProfileCreationError(user_id, e.message) from e

        if profile is None:
            raise ProfileCreationError(user_id, "profile row missing after insert")

        if not inserted:
            logger.info("Profile for user %s was created concurrently", user_id)

        return CreateProfileResult(profile=profile, created=inserted)

    async def update_profile(self, user_id: str, update: ProfileUpdate) -> Profile:
        """Replace display name, phone and bio."""
        profile = await asyncio.to_thread(
            self._repository.update_fields,
            user_id,
            {
                "full_name": update.display_name,
                "phone": update.phone,
                "bio": update.bio,
            },
        )
        if profile is None:
            raise ProfileNotFoundError(user_id)
        return profile

    async def promote_to_landlord(self, user_id: str) -> RoleChangeResult:
        """Set the role to landlord, then mirror it into auth metadata."""
        logger.info("Updating user type to landlord for user %s", user_id)

        profile = await asyncio.to_thread(self._repository.update_role, user_id, UserRole.LANDLORD)
        if profile is None:
            raise ProfileNotFoundError(user_id)

        try:
            await asyncio.to_thread(self._repository.update_auth_metadata, user_id, UserRole.LANDLORD)
        except ProfileStoreError as e:
            logger.warning("Error updating auth metadata for user %s: %s", user_id, e.message)
            return RoleChangeResult(
                profile=profile,
                metadata_updated=False,
                warning=f"Profile updated but metadata update failed: {e.message}",
            )

        return RoleChangeResult(profile=profile, metadata_updated=True)
