"""Supabase repository for cache documents."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from whattoeat.services.cache import CacheEntry, CacheRepository


@dataclass
class SupabaseCacheRepository(CacheRepository):
    """Supabase implementation for a cache collection."""

    client: Client
    table_name: str = "cache_entries"

    def find(self, key: str) -> CacheEntry | None:
        """Return the entry stored under a key."""
        response = (
            self.client.table(self.table_name)
            .select("id, key, value, expires_at")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        expires_raw = row.get("expires_at")
        return CacheEntry(
            id=str(row["id"]),
            key=row["key"],
            value=row.get("value"),
            expires_at=(
                datetime.fromisoformat(expires_raw)
                if isinstance(expires_raw, str) and expires_raw
                else None
            ),
        )

    def insert(
        self, key: str, value: object, expires_at: datetime | None, now: datetime
    ) -> None:
        """Create a cache row."""
        response = (
            self.client.table(self.table_name)
            .insert(
                {
                    "key": key,
                    "value": value,
                    "expires_at": expires_at.isoformat() if expires_at else None,
                    "created_at": now.isoformat(),
                    "updated_at": now.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create cache entry in Supabase")

    def update(
        self, entry_id: str, value: object, expires_at: datetime | None, now: datetime
    ) -> None:
        """Replace an existing cache row's value and expiry."""
        self.client.table(self.table_name).update(
            {
                "value": value,
                "expires_at": expires_at.isoformat() if expires_at else None,
                "updated_at": now.isoformat(),
            }
        ).eq("id", entry_id).execute()

    def delete(self, entry_id: str) -> None:
        """Delete a cache row by id."""
        self.client.table(self.table_name).delete().eq("id", entry_id).execute()

    def delete_key(self, key: str) -> None:
        """Delete every row for a key."""
        self.client.table(self.table_name).delete().eq("key", key).execute()

    def delete_expired(self, now: datetime) -> int:
        """Delete rows that expired before now."""
        response = (
            self.client.table(self.table_name)
            .delete()
            .lt("expires_at", now.isoformat())
            .execute()
        )
        return len(response.data or [])
