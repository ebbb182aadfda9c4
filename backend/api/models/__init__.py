"""API models package."""

from .errors import ErrorResponse
from .user import TokenPayload, UserProfileResponse

__all__ = [
    "ErrorResponse",
    "TokenPayload",
    "UserProfileResponse",
]
