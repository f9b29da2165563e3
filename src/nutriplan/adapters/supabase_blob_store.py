"""Supabase-backed key-value blob store."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from nutriplan.services.food_log import BlobStore


@dataclass
class SupabaseBlobStore(BlobStore):
    """Blob store persisting values as rows of a key/value table."""

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
        """Insert or replace the row for a key."""
        self.client.table(self.table).upsert(
            {
                "key": key,
                "value": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="key",
        ).execute()
