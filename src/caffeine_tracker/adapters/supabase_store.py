"""Supabase-backed key-value store."""

from dataclasses import dataclass

from supabase import Client

from caffeine_tracker.services.intake_log import KeyValueStore


@dataclass
class SupabaseKeyValueStore(KeyValueStore):
    """Supabase implementation storing one row per key.

    Writes are plain upserts without locking, so concurrent writers race and
    the last one wins.
    """

    client: Client
    table: str = "kv_store"

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        value = response.data[0].get("value")
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Insert or overwrite the value for a key."""
        self.client.table(self.table).upsert(
            {"key": key, "value": value},
            on_conflict="key",
        ).execute()

    def delete(self, key: str) -> None:
        """Delete the row for a key."""
        self.client.table(self.table).delete().eq("key", key).execute()
