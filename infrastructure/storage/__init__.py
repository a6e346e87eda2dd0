"""Key-value store adapters for the semantic cache."""
from infrastructure.storage.json_file_store import JsonFileKeyValueStore
from infrastructure.storage.supabase_store import SupabaseKeyValueStore

__all__ = [
    "JsonFileKeyValueStore",
    "SupabaseKeyValueStore",
]
