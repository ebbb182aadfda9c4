"""
Profile repository for database access.

Encapsulates all Supabase queries against the ``profiles`` table and the
``update_user_metadata`` RPC.
"""

from datetime import datetime, timezone
from typing import Optional, Any

from shared.repository import BaseRepository
from .models import Profile, UserRole
from .exceptions import ProfileStoreError


class ProfileRepository(BaseRepository[Profile]):
    """
    Repository for profile data access.

    Every failed query is raised as ProfileStoreError. A missing row is
    not a failure: reads and updates return None for it.
    """

    table_name = "profiles"

    def get_by_id(self, user_id: str) -> Optional[Profile]:
        """
        Get a profile by user ID.

        Returns:
            Profile, or None if no row exists.
        """
        result = self._execute("lookup", self._table().select("*").eq("id", user_id))
        if not result.data:
            return None
        return self._map_to_profile(result.data[0])

    def insert_if_absent(self, data: dict[str, Any]) -> bool:
        """
        Insert a profile row unless one already exists for its ID.

        Uses an upsert that ignores duplicates, so a row inserted by a
        concurrent caller is left untouched.

        Returns:
            True if this call inserted the row.
        """
        query = self._table().upsert(data, on_conflict="id", ignore_duplicates=True)
        result = self._execute("insert", query)
        return bool(result.data)

    def update_fields(self, user_id: str, data: dict[str, Any]) -> Optional[Profile]:
        """
        Update columns of a profile and refresh ``updated_at``.

        Returns:
            The updated profile, or None if no row exists.
        """
        data = {**data, "updated_at": datetime.now(timezone.utc).isoformat()}
        result = self._execute("update", self._table().update(data).eq("id", user_id))
        if not result.data:
            return None
        return self._map_to_profile(result.data[0])

    def update_role(self, user_id: str, role: UserRole) -> Optional[Profile]:
        """Set the ``user_type`` column of a profile."""
        return self.update_fields(user_id, {"user_type": role.value})

    def update_auth_metadata(self, user_id: str, role: UserRole) -> None:
        """Copy a role into the auth user's metadata via RPC."""
        self._execute(
            "metadata update",
            self._db.rpc("update_user_metadata", {"user_id": user_id, "user_type": role.value}),
        )

    @staticmethod
    def build_row(
        user_id: str,
        email: str,
        role: UserRole,
        display_name: Optional[str],
    ) -> dict[str, Any]:
        """Build a new ``profiles`` row."""
        now = datetime.now(timezone.utc).isoformat()
        return {
            "id": user_id,
            "email": email,
            "user_type": role.value,
            "full_name": display_name,
            "created_at": now,
            "updated_at": now,
        }

    def _execute(self, operation: str, query: Any) -> Any:
        try:
            return query.execute()
        except Exception as e:
            raise ProfileStoreError(operation, str(e)) from e

    def _map_to_profile(self, data: dict[str, Any]) -> Profile:
        """Map a database row to a Profile."""
        try:
            return Profile(
                id=str(data["id"]),
                email=data.get("email") or "",
                role=UserRole(data["user_type"]),
                display_name=data.get("full_name"),
                phone=data.get("phone"),
                bio=data.get("bio"),
                avatar_url=data.get("avatar_url"),
                created_at=data["created_at"],
                updated_at=data["updated_at"],
            )
        except (KeyError, ValueError) as e:
            # pydantic's ValidationError is a ValueError
            raise ProfileStoreError("decode", f"malformed profile row: {e}") from e
