"""
Identity resolution.

Turns a Principal into an EffectiveSession: look the profile up, create it
if (and only if) it is missing and the signup attributes say which role to
create it with, and derive the effective role.

The two steps are public (lookup_profile, create_profile_if_absent) so each
can be exercised on its own. resolve() never raises for store or creation
failures; it returns a session with ``profile=None`` and ``error`` set.
"""

import logging
from typing import Optional

from modules.profiles.interfaces import IProfileStore, IProfileCreator
from modules.profiles.models import CreateProfileRequest, Profile
from modules.profiles.exceptions import ProfileCreationError, ProfileLookupError

from .models import EffectiveSession, Principal, ResolutionFailure
from .exceptions import RoleUndeterminedError
from .roles import derive_role, require_role

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Resolves principals to profiles and effective roles."""

    def __init__(self, store: IProfileStore, creator: IProfileCreator):
        self._store = store
        self._creator = creator

    async def lookup_profile(self, principal_id: str) -> Optional[Profile]:
        """
        Read the profile for a principal.

        Returns:
            Profile, or None if none exists yet

        Raises:
            ProfileLookupError: If the store could not be read
        """
        return await self._store.get_profile(principal_id)

    async def create_profile_if_absent(self, principal: Principal) -> Profile:
        """
        Create the principal's profile from its signup attributes.

        The creation service is idempotent, so calling this when the row
        already exists returns that row without writing.

        Raises:
            RoleUndeterminedError: If signup attributes carry no usable role
            ProfileCreationError: If the creation service fails
        """
        signup = principal.signup
        try:
            role = require_role(principal.id, signup_attributes=principal.signup_attributes)
        except RoleUndeterminedError:
            logger.error(
                "No usable user_type in signup attributes for user %s (got %r)",
                principal.id,
                signup.role,
            )
            raise

        if not principal.email:
            raise ProfileCreationError(principal.id, "principal has no email")

        request = CreateProfileRequest(
            user_id=principal.id,
            email=principal.email,
            role=role,
            display_name=signup.display_name,
        )
        result = await self._creator.create_profile(request, access_token=principal.access_token)
        return result.profile

    async def resolve(self, principal: Principal) -> EffectiveSession:
        """
        Resolve a principal to an EffectiveSession.

        Writes at most once, and only when no profile exists.
        """
        try:
            profile = await self.lookup_profile(principal.id)
        except ProfileLookupError as e:
            logger.error("Profile lookup failed for user %s: %s", principal.id, e.message)
            return EffectiveSession(principal=principal, error=ResolutionFailure.from_error(e))

        if profile is not None:
            return EffectiveSession(
                principal=principal,
                profile=profile,
                effective_role=derive_role(profile, principal.signup_attributes),
            )

        logger.info("Profile not found for user %s", principal.id)

        try:
            profile = await self.create_profile_if_absent(principal)
        except RoleUndeterminedError as e:
            return EffectiveSession(principal=principal, error=ResolutionFailure.from_error(e))
        except ProfileCreationError as e:
            logger.error("Profile creation failed for user %s: %s", principal.id, e.message)
            # No profile exists, so the signup role is the best remaining source
            return EffectiveSession(
                principal=principal,
                effective_role=derive_role(None, principal.signup_attributes),
                error=ResolutionFailure.from_error(e),
            )

        logger.info("Resolved user %s with new profile, role %s", principal.id, profile.role.value)
        return EffectiveSession(principal=principal, profile=profile, effective_role=profile.role)

    async def refresh(self, current: EffectiveSession) -> EffectiveSession:
        """
        Re-read the profile of the current principal.

        Never creates a profile. On lookup failure the previous profile is
        kept and the failure is reported in ``error``.
        """
        principal = current.principal
        if principal is None:
            return current

        try:
            profile = await self.lookup_profile(principal.id)
        except ProfileLookupError as e:
            logger.warning("Profile refresh failed for user %s: %s", principal.id, e.message)
            return current.model_copy(
                update={"is_loading": False, "error": ResolutionFailure.from_error(e)}
            )

        return EffectiveSession(
            principal=principal,
            profile=profile,
            effective_role=derive_role(profile, principal.signup_attributes),
            error=None if profile is not None else current.error,
        )
