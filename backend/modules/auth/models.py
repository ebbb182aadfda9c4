"""
Authentication module data models.

Principal is what the auth provider asserts; EffectiveSession is what the
rest of the application reads.
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.profiles.models import Profile, UserRole
from shared.exceptions import RentHubError


class SessionState(str, Enum):
    """Lifecycle state of the session manager."""

    UNINITIALIZED = "uninitialized"  # start() not called yet
    LOADING = "loading"              # Resolving a principal
    READY = "ready"                  # Session published
    SIGNED_OUT = "signed_out"        # No principal


class AuthEventType(str, Enum):
    """Auth-state transitions, named as Supabase emits them."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    # Local only: re-read the profile after an edit
    PROFILE_REFRESH = "PROFILE_REFRESH"
    # Local only: signed up, email confirmation pending
    AWAITING_CONFIRMATION = "AWAITING_CONFIRMATION"


class SignupAttributes(BaseModel):
    """
    Typed view of the metadata attached to an auth user at signup.

    Stored by Supabase as ``user_metadata`` with the keys ``user_type``
    and ``name``.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    role: Optional[str] = Field(None, alias="user_type")
    display_name: Optional[str] = Field(None, alias="name")

    @field_validator("role", "display_name", mode="before")
    @classmethod
    def drop_non_strings(cls, v: Any) -> Optional[str]:
        """Metadata is user-supplied JSON; anything but a string counts as absent."""
        return v if isinstance(v, str) else None

    @classmethod
    def for_signup(
        cls,
        email: str,
        role: UserRole,
        display_name: Optional[str] = None,
    ) -> dict[str, Any]:
        """Metadata to send with a sign-up request."""
        return {
            "user_type": role.value,
            "name": display_name or email.split("@")[0],
        }


class Principal(BaseModel):
    """An authenticated identity as asserted by the auth provider."""

    model_config = {"frozen": True}

    id: str = Field(..., description="Auth user ID (UUID)")
    email: str = Field(default="", description="Current email")
    signup_attributes: dict[str, Any] = Field(default_factory=dict)
    access_token: Optional[str] = Field(None, repr=False, exclude=True)

    @property
    def signup(self) -> SignupAttributes:
        """Signup attributes parsed into their known fields."""
        return SignupAttributes.model_validate(self.signup_attributes)


class ResolutionFailure(BaseModel):
    """Why a session has no profile."""

    model_config = {"frozen": True}

    code: str
    message: str

    @classmethod
    def from_error(cls, error: RentHubError) -> "ResolutionFailure":
        return cls(code=error.code, message=error.message)


class EffectiveSession(BaseModel):
    """
    The resolved, read-only session consumed by the application.

    ``effective_role`` is None when no role could be determined; it is
    never filled in with a default.
    """

    model_config = {"frozen": True}

    principal: Optional[Principal] = None
    profile: Optional[Profile] = None
    effective_role: Optional[UserRole] = None
    is_loading: bool = False
    error: Optional[ResolutionFailure] = None

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None

    @property
    def is_landlord(self) -> bool:
        return self.effective_role == UserRole.LANDLORD

    @property
    def is_tenant(self) -> bool:
        return self.effective_role == UserRole.TENANT

    @property
    def needs_profile_setup(self) -> bool:
        """Signed in, done loading, but without a profile row."""
        return self.principal is not None and self.profile is None and not self.is_loading
