"""
Supabase implementation of KeyValueStore.

Expects a table with a unique text ``key`` column and a text ``value`` column.
The Supabase client is synchronous, so calls run in a worker thread.
"""
import asyncio
import logging
from typing import Optional

from supabase import Client

from exercise_resolver.exceptions import CacheStoreError

logger = logging.getLogger(__name__)


class SupabaseKeyValueStore:
    """Supabase-backed string store."""

    def __init__(self, client: Client, table: str = "semantic_cache"):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
            table: Table holding key/value rows
        """
        self._client = client
        self._table = table

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._get, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, value)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._delete, key)

    def _get(self, key: str) -> Optional[str]:
        try:
            result = self._client.table(self._table) \
                .select("value") \
                .eq("key", key) \
                .limit(1) \
                .execute()
        except Exception as e:
            raise CacheStoreError(f"Error reading '{key}' from {self._table}: {e}") from e

        if result.data and len(result.data) > 0:
            return result.data[0].get("value")
        return None

    def _set(self, key: str, value: str) -> None:
        try:
            self._client.table(self._table).upsert({
                "key": key,
                "value": value,
            }, on_conflict="key").execute()
        except Exception as e:
            raise CacheStoreError(f"Error writing '{key}' to {self._table}: {e}") from e
        logger.debug(f"Saved {len(value)} chars to {self._table}.{key}")

    def _delete(self, key: str) -> None:
        try:
            self._client.table(self._table) \
                .delete() \
                .eq("key", key) \
                .execute()
        except Exception as e:
            raise CacheStoreError(f"Error deleting '{key}' from {self._table}: {e}") from e
