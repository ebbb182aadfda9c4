"""
Profiles module exceptions.

Store failures are raised by the repository as ProfileStoreError; the
service translates them into the lookup/creation errors that the identity
resolver understands.
"""

from shared.exceptions import RentHubError, NotFoundError, ExternalServiceError


class ProfileError(RentHubError):
    """Base exception for profile-related errors."""

    pass


class ProfileStoreError(ExternalServiceError):
    """Raised when a query against the profiles table fails."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"Profile store {operation} failed: {reason}",
            service="supabase",
            code="PROFILE_STORE_ERROR",
            details={"operation": operation},
        )
        self.operation = operation


class ProfileLookupError(ProfileError):
    """
    Raised when reading a profile fails for a reason other than "not found".

    A missing profile is not an error; lookups return None for it.
    """

    status_code = 502

    def __init__(self, user_id: str, reason: str):
        super().__init__(
            f"Could not look up profile for user {user_id}: {reason}",
            code="PROFILE_LOOKUP_FAILED",
            details={"user_id": user_id},
        )


class ProfileCreationError(ProfileError):
    """Raised when the profile creation service fails."""

    status_code = 500

    def __init__(self, user_id: str, reason: str):
        super().__init__(
            f"Failed to create profile for user {user_id}: {reason}",
            code="PROFILE_CREATION_FAILED",
            details={"user_id": user_id, "reason": reason},
        )


class ProfileNotFoundError(NotFoundError):
    """Raised when an operation needs a profile that does not exist."""

    def __init__(self, user_id: str):
        super().__init__(
            f"Profile not found: {user_id}",
            code="PROFILE_NOT_FOUND",
            details={"user_id": user_id},
        )
