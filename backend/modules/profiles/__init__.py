"""
Profiles module.

Owns the ``profiles`` table: lookup, idempotent creation, edits and role
changes.

Public API:
- IProfileStore / IProfileCreator / IProfileService: interfaces
- Profile, UserRole, ProfileUpdate, CreateProfileRequest: models
- Profile exceptions: ProfileLookupError, ProfileCreationError, etc.
"""

from .interfaces import IProfileStore, IProfileCreator, IProfileService
from .models import (
    UserRole,
    Profile,
    ProfileUpdate,
    CreateProfileRequest,
    CreateProfileResult,
    RoleChangeResult,
)
from .exceptions import (
    ProfileError,
    ProfileStoreError,
    ProfileLookupError,
    ProfileCreationError,
    ProfileNotFoundError,
)

__all__ = [
    # Interfaces
    "IProfileStore",
    "IProfileCreator",
    "IProfileService",
    # Models
    "UserRole",
    "Profile",
    "ProfileUpdate",
    "CreateProfileRequest",
    "CreateProfileResult",
    "RoleChangeResult",
    # Exceptions
    "ProfileError",
    "ProfileStoreError",
    "ProfileLookupError",
    "ProfileCreationError",
    "ProfileNotFoundError",
]
