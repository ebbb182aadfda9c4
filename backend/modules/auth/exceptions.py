"""
Authentication module exceptions.

Token errors are raised by the API middleware, AuthError by the auth
provider adapters, and the resolution errors by the identity resolver and
session manager.
"""

from shared.exceptions import (
    RentHubError,
    AuthenticationError,
    AuthorizationError,
    ValidationError,
)


class AuthError(AuthenticationError):
    """
    Raised when the auth provider rejects an operation.

    Covers invalid credentials, duplicate emails and weak passwords.
    The message is the provider's own and is safe to show to the user.
    """

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_ERROR")


class InvalidTokenError(AuthenticationError):
    """Raised when a JWT token is invalid or malformed."""

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a JWT token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class InsufficientPermissionsError(AuthorizationError):
    """Raised when user lacks required permissions."""

    def __init__(self, required_role: str, user_role: str):
        super().__init__(
            f"Insufficient permissions. Required: {required_role}, has: {user_role}",
            code="INSUFFICIENT_PERMISSIONS",
            details={"required_role": required_role, "user_role": user_role},
        )


class InvalidRoleError(ValidationError):
    """Raised when a role string is neither landlord nor tenant."""

    def __init__(self, role: object):
        super().__init__(
            f"Invalid role: {role!r}. Expected 'landlord' or 'tenant'",
            code="INVALID_ROLE",
            details={"role": str(role)},
        )


class RoleUndeterminedError(RentHubError):
    """
    Raised when no role can be derived for a user.

    The user has no profile and their signup attributes carry no usable
    role, so a profile cannot be created safely.
    """

    status_code = 409

    def __init__(self, user_id: str):
        super().__init__(
            f"Cannot determine role for user {user_id}: no profile and no role in signup attributes",
            code="ROLE_UNDETERMINED",
            details={"user_id": user_id},
        )


class ResolutionTimeoutError(RentHubError):
    """Raised when identity resolution does not finish in time."""

    status_code = 504

    def __init__(self, user_id: str, timeout: float):
        super().__init__(
            f"Identity resolution for user {user_id} timed out after {timeout:g}s",
            code="RESOLUTION_TIMEOUT",
            details={"user_id": user_id, "timeout_seconds": timeout},
        )


class AwaitingConfirmationError(RentHubError):
    """Raised when a new account has no session until its email is confirmed."""

    status_code = 403

    def __init__(self, user_id: str):
        super().__init__(
            f"User {user_id} must confirm their email before the profile can be created",
            code="AWAITING_CONFIRMATION",
            details={"user_id": user_id},
        )
