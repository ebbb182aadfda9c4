"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, EmailStr, Field


class AuthenticatedUser(BaseModel):
    """
    The caller of an HTTP endpoint, as asserted by a verified Supabase JWT.

    Route handlers receive this via dependency injection.
    """

    id: str = Field(..., description="User ID (UUID from Supabase)")
    email: EmailStr = Field(..., description="User's email address")
    email_verified: bool = Field(default=False, description="Whether email is verified")
    last_sign_in: Optional[datetime] = Field(None, description="Token issue time")
    user_metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Attributes attached at signup (user_type, name)",
    )

    model_config = {
        "frozen": True,
        "extra": "ignore",
    }
