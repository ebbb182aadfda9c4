"""
Authentication module.

Resolves signed-in identities to profiles and roles, and manages the
current session.

Public API:
- IAuthProvider: Interface to the external auth provider
- IdentityResolver: principal -> EffectiveSession
- SessionManager: ordered handling of auth-state transitions
- derive_role: the single role precedence rule
- Auth exceptions: AuthError, RoleUndeterminedError, token errors, etc.
"""

from .interfaces import IAuthProvider, IIdentityResolver
from .models import (
    Principal,
    SignupAttributes,
    EffectiveSession,
    ResolutionFailure,
    SessionState,
    AuthEventType,
)
from .exceptions import (
    AuthError,
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    InsufficientPermissionsError,
    InvalidRoleError,
    RoleUndeterminedError,
    ResolutionTimeoutError,
)
from .roles import derive_role, require_role, parse_role
from .resolver import IdentityResolver
from .session import SessionManager

__all__ = [
    # Interfaces
    "IAuthProvider",
    "IIdentityResolver",
    # Models
    "Principal",
    "SignupAttributes",
    "EffectiveSession",
    "ResolutionFailure",
    "SessionState",
    "AuthEventType",
    # Exceptions
    "AuthError",
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "InsufficientPermissionsError",
    "InvalidRoleError",
    "RoleUndeterminedError",
    "ResolutionTimeoutError",
    # Logic
    "derive_role",
    "require_role",
    "parse_role",
    "IdentityResolver",
    "SessionManager",
]
