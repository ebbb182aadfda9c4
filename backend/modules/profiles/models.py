"""
Profiles module data models.

A profile is the durable application record for a user, one-to-one with
the Supabase auth user. The ``profiles`` table names two columns
differently from these models: ``user_type`` holds the role and
``full_name`` holds the display name.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """Marketplace role of a user."""

    LANDLORD = "landlord"  # Lists and manages properties
    TENANT = "tenant"      # Browses and favorites properties


class Profile(BaseModel):
    """A row of the ``profiles`` table."""

    model_config = {"frozen": True}

    id: str = Field(..., description="User ID (same as the auth user ID)")
    email: str = Field(..., description="Email address at creation time")
    role: UserRole = Field(..., description="Marketplace role")
    display_name: Optional[str] = Field(None, description="Display name")
    phone: Optional[str] = Field(None, description="Contact phone")
    bio: Optional[str] = Field(None, description="Free-text bio")
    avatar_url: Optional[str] = Field(None, description="Avatar URL")
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(BaseModel):
    """
    Editable profile fields.

    Applying an update replaces all three fields; a field left as None
    clears the stored value.
    """

    display_name: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=50)
    bio: Optional[str] = Field(None, max_length=2000)


class CreateProfileRequest(BaseModel):
    """Input of the profile creation service."""

    user_id: str = Field(..., min_length=1, description="Auth user ID")
    email: str = Field(..., min_length=3, description="Auth user email")
    role: UserRole = Field(..., description="Role chosen at signup")
    display_name: Optional[str] = Field(None, description="Name given at signup")

    def default_display_name(self) -> str:
        """Display name to store, falling back to the email local part."""
        return self.display_name or self.email.split("@")[0]


class CreateProfileResult(BaseModel):
    """Output of the profile creation service."""

    success: bool = True
    profile: Profile
    created: bool = Field(..., description="False when the row already existed")


class RoleChangeResult(BaseModel):
    """Result of promoting a user to landlord."""

    success: bool = True
    profile: Profile
    metadata_updated: bool = Field(
        ..., description="Whether the auth user metadata was updated too"
    )
    warning: Optional[str] = None
