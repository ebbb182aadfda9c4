"""
Authentication module interfaces.

The session manager depends on IAuthProvider, not on Supabase, so tests can
drive it with an in-memory provider.
"""

from typing import Any, Callable, Optional, Protocol, runtime_checkable

from .models import AuthEventType, EffectiveSession, Principal

# Receives every auth-state transition pushed by the provider
AuthStateCallback = Callable[[AuthEventType, Optional[Principal]], None]


@runtime_checkable
class IAuthProvider(Protocol):
    """
    Interface to the external auth provider.

    Implementations raise AuthError when the provider rejects an
    operation. Attributes passed to sign_up must come back unmodified as
    ``Principal.signup_attributes`` on every later session.
    """

    async def get_current_session(self) -> Optional[Principal]:
        """
        Get the principal of the current session.

        Returns:
            Principal, or None if nobody is signed in
        """
        ...

    async def sign_up(
        self,
        email: str,
        password: str,
        attributes: dict[str, Any],
    ) -> Principal:
        """
        Create credentials with signup attributes attached.

        Raises:
            AuthError: On duplicate email, weak password, etc.
        """
        ...

    async def sign_in_with_password(self, email: str, password: str) -> Principal:
        """
        Sign in with email and password.

        Raises:
            AuthError: On invalid credentials
        """
        ...

    async def sign_out(self) -> None:
        """End the current session."""
        ...

    def on_auth_state_change(self, callback: AuthStateCallback) -> Callable[[], None]:
        """
        Register a callback for provider-pushed transitions.

        Returns:
            A function that unsubscribes the callback
        """
        ...


@runtime_checkable
class IIdentityResolver(Protocol):
    """Interface of the identity resolver used by the session manager."""

    async def resolve(self, principal: Principal) -> EffectiveSession:
        ...

    async def refresh(self, current: EffectiveSession) -> EffectiveSession:
        ...
