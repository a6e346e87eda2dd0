"""
Key-Value Store Interface (Port).

Durable string storage used to persist the semantic cache. Implementations
raise ``CacheStoreError`` when the backing store cannot be reached.
"""
from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """Abstract interface for durable string storage keyed by string."""

    async def get(self, key: str) -> Optional[str]:
        """
        Read a value.

        Args:
            key: Storage key

        Returns:
            Stored string, or None if the key does not exist
        """
        ...

    async def set(self, key: str, value: str) -> None:
        """Write (or overwrite) a value."""
        ...

    async def delete(self, key: str) -> None:
        """Remove a key. Missing keys are not an error."""
        ...
