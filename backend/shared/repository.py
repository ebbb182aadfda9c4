"""
Base repository class for database access.

Encapsulates Supabase client access so that services never build queries
themselves.
"""

from typing import TypeVar, Generic
from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Subclasses implement table-specific data access and map rows to
    Pydantic models internally.

    Example:
        class ProfileRepository(BaseRepository[Profile]):
            def get_by_id(self, user_id: str) -> Optional[Profile]:
                result = self._db.table("profiles").select("*").eq("id", user_id).execute()
                if not result.data:
                    return None
                return self._map_to_profile(result.data[0])
    """

    table_name: str = ""

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    def _table(self):
        """Query builder for this repository's table."""
        return self._db.table(self.table_name)
