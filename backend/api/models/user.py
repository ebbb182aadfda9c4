"""
User models for the HTTP API.

TokenPayload is the decoded Supabase JWT; UserProfileResponse is what
``/api/users/me`` returns.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from modules.profiles.models import Profile, UserRole


class TokenPayload(BaseModel):
    """JWT token payload structure."""

    sub: str  # User ID
    email: str
    email_confirmed_at: Optional[str] = None
    aud: str  # Audience
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
    user_metadata: dict[str, Any] = Field(default_factory=dict)


class UserProfileResponse(BaseModel):
    """The caller's profile and effective role."""

    id: str
    email: str
    email_verified: bool
    role: UserRole
    profile: Profile

    @classmethod
    def build(cls, profile: Profile, email_verified: bool) -> "UserProfileResponse":
        return cls(
            id=profile.id,
            email=profile.email,
            email_verified=email_verified,
            role=profile.role,
            profile=profile,
        )
