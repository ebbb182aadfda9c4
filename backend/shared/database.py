"""
Supabase client factory.

Two kinds of clients exist:
- the service-role client, used by the privileged profile endpoints to
  bypass row level security
- anon-key clients, used for auth flows (sign-up, sign-in) and for
  queries made on behalf of a signed-in user
"""

from typing import Optional
from supabase import create_client, Client

from .config import get_settings

# Module-level client cache
_service_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    Use this for profile creation and administrative role changes.

    Returns:
        Supabase client configured with service role key

    Raises:
        RuntimeError: If SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is unset
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def get_supabase_anon_client() -> Client:
    """
    Create a Supabase client with the public anon key.

    A fresh client is returned on every call because it carries the auth
    session of whoever signs in with it.
    """
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
        )
    return create_client(settings.supabase_url, settings.supabase_anon_key)


def reset_client_cache() -> None:
    """Reset the cached service-role client (used by tests)."""
    global _service_client
    _service_client = None
