"""
Privileged profile endpoints.

These run with the service-role client: creating a profile on first sign-in
and promoting a user to landlord.
"""

from fastapi import APIRouter, Depends

from api.middleware.auth import get_current_user
from api.dependencies import get_profile_service
from api.models.errors import ErrorResponse
from modules.auth.exceptions import InsufficientPermissionsError
from shared.models import AuthenticatedUser

from .interfaces import IProfileService
from .models import CreateProfileRequest, CreateProfileResult, RoleChangeResult

router = APIRouter(responses={401: {"model": ErrorResponse}})


@router.post(
    "/create-profile",
    response_model=CreateProfileResult,
    responses={403: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_profile(
    request: CreateProfileRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProfileService = Depends(get_profile_service),
) -> CreateProfileResult:
    """
    Create the caller's profile, or return it if it already exists.

    Callers may only create their own profile.
    """
    if request.user_id != user.id:
        raise InsufficientPermissionsError("profile owner", "other user")
    return await service.create_profile(request)


@router.post(
    "/update-user-type",
    response_model=RoleChangeResult,
    responses={404: {"model": ErrorResponse}},
)
async def update_user_type(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IProfileService = Depends(get_profile_service),
) -> RoleChangeResult:
    """
    Promote the caller to landlord.

    Succeeds partially (metadata_updated=false) when only the auth
    metadata copy could not be updated.
    """
    return await service.promote_to_landlord(user.id)
