"""
Wiring for a client-side session manager.

The manager signs users in with the anon key, reads profiles through the
same client (so row level security applies to the signed-in user) and
creates missing profiles through the backend's create-profile endpoint.
"""

from typing import Optional

from supabase import Client

from shared.database import get_supabase_anon_client
from modules.profiles.client import HttpProfileCreationClient
from modules.profiles.interfaces import IProfileCreator
from modules.profiles.repository import ProfileRepository
from modules.profiles.service import ProfileService

from .provider import SupabaseAuthProvider
from .resolver import IdentityResolver
from .session import SessionManager


def create_session_manager(
    client: Optional[Client] = None,
    creator: Optional[IProfileCreator] = None,
    resolution_timeout: Optional[float] = None,
) -> SessionManager:
    """
    Build a SessionManager backed by Supabase.

    Args:
        client: Anon-key Supabase client; a new one is created if omitted
        creator: Profile creation service; defaults to the HTTP client
        resolution_timeout: Override for SESSION_RESOLUTION_TIMEOUT_SECONDS

    Returns:
        A SessionManager; call ``start()`` before use
    """
    client = client or get_supabase_anon_client()
    store = ProfileService(ProfileRepository(client))
    resolver = IdentityResolver(store=store, creator=creator or HttpProfileCreationClient())
    return SessionManager(
        SupabaseAuthProvider(client),
        resolver,
        resolution_timeout=resolution_timeout,
    )
