"""
Role derivation.

A user's role can come from two places: the profile row and the metadata
attached at signup. The precedence between them lives here and nowhere
else:

1. the profile's role, if a profile exists (an administrative change to the
   row must win over the original signup choice)
2. otherwise the role from signup attributes, if it is a known role
3. otherwise no role at all; callers must treat this as a failure rather
   than assume tenant
"""

from typing import Any, Mapping, Optional

from modules.profiles.models import Profile, UserRole

from .exceptions import InvalidRoleError, RoleUndeterminedError
from .models import SignupAttributes


def parse_role(value: Any) -> UserRole:
    """Parse a role string, raising InvalidRoleError for unknown values."""
    if isinstance(value, UserRole):
        return value
    try:
        return UserRole(str(value).strip().lower())
    except ValueError:
        raise InvalidRoleError(value)


def coerce_role(value: Any) -> Optional[UserRole]:
    """Parse a role string, returning None when absent or unknown."""
    if value is None or value == "":
        return None
    try:
        return parse_role(value)
    except InvalidRoleError:
        return None


def derive_role(
    profile: Optional[Profile] = None,
    signup_attributes: Optional[Mapping[str, Any]] = None,
) -> Optional[UserRole]:
    """
    Derive the effective role of a user.

    Args:
        profile: The user's profile row, if one exists
        signup_attributes: Raw metadata attached at signup

    Returns:
        The effective role, or None if it cannot be determined
    """
    if profile is not None:
        return profile.role

    if signup_attributes:
        return coerce_role(SignupAttributes.model_validate(dict(signup_attributes)).role)

    return None


def require_role(
    user_id: str,
    profile: Optional[Profile] = None,
    signup_attributes: Optional[Mapping[str, Any]] = None,
) -> UserRole:
    """Like derive_role, but raise RoleUndeterminedError instead of returning None."""
    role = derive_role(profile, signup_attributes)
    if role is None:
        raise RoleUndeterminedError(user_id)
    return role
