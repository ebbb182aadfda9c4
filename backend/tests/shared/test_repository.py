"""Tests for shared/repository.py."""

from typing import Optional
from unittest.mock import MagicMock

from shared.repository import BaseRepository


class TestBaseRepository:
    """Tests for BaseRepository base class."""

    def test_init_stores_db_client(self):
        """Should store the database client in _db attribute."""
        mock_db = MagicMock()
        repo = BaseRepository(mock_db)
        assert repo._db is mock_db

    def test_table_uses_table_name(self):
        """_table() should build a query for the subclass's table."""

        class ListingRepository(BaseRepository[dict]):
            table_name = "properties"

        mock_db = MagicMock()
        repo = ListingRepository(mock_db)
        repo._table()

        mock_db.table.assert_called_once_with("properties")

    def test_subclass_can_query(self):
        """Subclass should be able to build queries through _table()."""
        mock_db = MagicMock()
        mock_db.table.return_value.select.return_value.eq.return_value.execute.return_value.data = [
            {"id": "123", "title": "Loft"}
        ]

        class ListingRepository(BaseRepository[dict]):
            table_name = "properties"

            def get_by_id(self, listing_id: str) -> Optional[dict]:
                result = self._table().select("*").eq("id", listing_id).execute()
                return result.data[0] if result.data else None

        repo = ListingRepository(mock_db)
        assert repo.get_by_id("123") == {"id": "123", "title": "Loft"}
        mock_db.table.return_value.select.return_value.eq.assert_called_once_with("id", "123")
