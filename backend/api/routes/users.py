"""
User-related endpoints.

Provides the caller's profile, profile edits and server-side session
resolution.
"""

from fastapi import APIRouter, Depends

from shared.models import AuthenticatedUser
from modules.auth.models import EffectiveSession, Principal
from modules.auth.resolver import IdentityResolver
from modules.profiles.exceptions import ProfileNotFoundError
from modules.profiles.interfaces import IProfileService
from modules.profiles.models import ProfileUpdate
from ..dependencies import get_identity_resolver, get_profile_service
from ..middleware.auth import get_current_user
from ..models.errors import ErrorResponse
from ..models.user import UserProfileResponse

router = APIRouter(responses={401: {"model": ErrorResponse}})


@router.get(
    "/me",
    response_model=UserProfileResponse,
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def get_current_user_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProfileService = Depends(get_profile_service),
) -> UserProfileResponse:
    """
    Get the current user's profile.

    Returns 404 when the profile has not been created yet; the client
    should then resolve the session or offer profile setup.
    """
    profile = await service.get_profile(user.id)
    if profile is None:
        raise ProfileNotFoundError(user.id)
    return UserProfileResponse.build(profile, user.email_verified)


@router.put(
    "/me",
    response_model=UserProfileResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_current_user_profile(
    update: ProfileUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProfileService = Depends(get_profile_service),
) -> UserProfileResponse:
    """Replace the caller's display name, phone and bio."""
    profile = await service.update_profile(user.id, update)
    return UserProfileResponse.build(profile, user.email_verified)


@router.post("/me/resolve", response_model=EffectiveSession)
async def resolve_current_user(
    user: AuthenticatedUser = Depends(get_current_user),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> EffectiveSession:
    """
    Resolve the caller's session, creating the profile if it is missing.

    Failures are reported in the ``error`` field rather than as an HTTP
    error, so the client can show its profile setup state.
    """
    principal = Principal(
        id=user.id,
        email=user.email,
        signup_attributes=user.user_metadata,
    )
    return await resolver.resolve(principal)
