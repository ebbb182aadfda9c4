"""
JWT Authentication middleware.

Validates Supabase JWT tokens and extracts user information.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from shared.config import get_settings
from shared.models import AuthenticatedUser
from modules.auth.exceptions import (
    ExpiredTokenError,
    InvalidTokenError,
    MissingTokenError,
)
from ..models.user import TokenPayload

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str) -> TokenPayload:
    """
    Decode and validate a Supabase JWT token.

    Args:
        token: The JWT token string

    Returns:
        TokenPayload with decoded claims

    Raises:
        MissingTokenError: If token is empty
        ExpiredTokenError: If token has expired
        InvalidTokenError: If token is malformed, or no secret is configured
    """
    if not token:
        raise MissingTokenError()

    settings = get_settings()
    if not settings.supabase_jwt_secret:
        raise InvalidTokenError("Server authentication not configured")

    try:
        payload = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            audience="authenticated",
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise ExpiredTokenError("Token has expired")
    except JWTError as e:
        raise InvalidTokenError(f"Invalid token: {str(e)}")


def get_user_from_payload(payload: TokenPayload) -> AuthenticatedUser:
    """
    Convert JWT payload to AuthenticatedUser model.

    Args:
        payload: Decoded JWT payload

    Returns:
        AuthenticatedUser instance
    """
    return AuthenticatedUser(
        id=payload.sub,
        email=payload.email,
        email_verified=payload.email_confirmed_at is not None,
        last_sign_in=datetime.fromtimestamp(payload.iat, tz=timezone.utc),
        user_metadata=payload.user_metadata,
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    if credentials is None:
        raise MissingTokenError("Missing authorization header")

    payload = decode_token(credentials.credentials)
    return get_user_from_payload(payload)

