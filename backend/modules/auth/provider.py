"""
Supabase implementation of IAuthProvider.

Wraps the ``auth`` namespace of a Supabase client created with the anon key.
The client's calls are synchronous; they run in a worker thread so a slow
auth server cannot block the event loop.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from supabase import Client

from .interfaces import IAuthProvider, AuthStateCallback
from .models import AuthEventType, Principal
from .exceptions import AuthError

logger = logging.getLogger(__name__)

# Supabase events that map onto our transitions; others are ignored
_EVENT_MAP = {
    "INITIAL_SESSION": AuthEventType.INITIAL_SESSION,
    "SIGNED_IN": AuthEventType.SIGNED_IN,
    "SIGNED_OUT": AuthEventType.SIGNED_OUT,
    "TOKEN_REFRESHED": AuthEventType.TOKEN_REFRESHED,
    "USER_UPDATED": AuthEventType.USER_UPDATED,
}


def principal_from_user(user: Any, access_token: Optional[str] = None) -> Principal:
    """Build a Principal from a Supabase ``User``."""
    return Principal(
        id=str(user.id),
        email=user.email or "",
        signup_attributes=dict(user.user_metadata or {}),
        access_token=access_token,
    )


def principal_from_session(session: Any) -> Optional[Principal]:
    """Build a Principal from a Supabase ``Session``, None when signed out."""
    if session is None or session.user is None:
        return None
    return principal_from_user(session.user, session.access_token)


class SupabaseAuthProvider(IAuthProvider):
    """Auth provider backed by Supabase Auth."""

    def __init__(self, client: Client):
        self._client = client

    async def get_current_session(self) -> Optional[Principal]:
        try:
            session = await asyncio.to_thread(self._client.auth.get_session)
        except Exception as e:
            raise AuthError(str(e)) from e
        return principal_from_session(session)

    async def sign_up(
        self,
        email: str,
        password: str,
        attributes: dict[str, Any],
    ) -> Principal:
        try:
            response = await asyncio.to_thread(
                self._client.auth.sign_up,
                {
                    "email": email,
                    "password": password,
                    "options": {"data": attributes},
                },
            )
        except Exception as e:
            raise AuthError(str(e)) from e

        if response.user is None:
            raise AuthError("User creation failed")

        # No session yet when email confirmation is required
        token = response.session.access_token if response.session else None
        return principal_from_user(response.user, token)

    async def sign_in_with_password(self, email: str, password: str) -> Principal:
        try:
            response = await asyncio.to_thread(
                self._client.auth.sign_in_with_password,
                {"email": email, "password": password},
            )
        except Exception as e:
            raise AuthError(str(e)) from e

        if response.user is None:
            raise AuthError("Sign-in returned no user")

        token = response.session.access_token if response.session else None
        return principal_from_user(response.user, token)

    async def sign_out(self) -> None:
        try:
            await asyncio.to_thread(self._client.auth.sign_out)
        except Exception as e:
            raise AuthError(str(e)) from e

    def on_auth_state_change(self, callback: AuthStateCallback) -> Callable[[], None]:
        def forward(event: str, session: Any) -> None:
            event_type = _EVENT_MAP.get(str(event))
            if event_type is None:
                logger.debug("Ignoring auth event %s", event)
                return
            callback(event_type, principal_from_session(session))

        subscription = self._client.auth.on_auth_state_change(forward)
        return subscription.unsubscribe
