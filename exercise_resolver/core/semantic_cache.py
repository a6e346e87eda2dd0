"""
Persisted semantic cache: normalized query -> standard exercise alternatives.

Loaded once from a KeyValueStore at engine start and written back in full after
every mutation. Persisted as a flat JSON object of query string to an array of
alternative names; iteration order of that object is the LRU order (oldest
first).
"""
import asyncio
import json
import logging
import time
from collections import OrderedDict
from typing import TYPE_CHECKING, Callable, Dict, Iterable, Optional

from exercise_resolver.core.models import MovementClassification, SemanticCacheEntry
from exercise_resolver.core.normalize import normalize_name
from exercise_resolver.exceptions import EngineInitializationError

if TYPE_CHECKING:
    from application.ports import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_CACHE_KEY = "semantic_exercise_cache"
DEFAULT_MAX_ENTRIES = 1000


class SemanticCache:
    """
    LRU cache of semantic mappings backed by durable storage.

    Reads refresh recency; inserting past ``max_entries`` evicts the least
    recently used entry. When ``ttl_seconds`` is set, entries older than that
    are dropped on read.
    """

    def __init__(
        self,
        store: "KeyValueStore",
        storage_key: str = DEFAULT_CACHE_KEY,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")

        self._store = store
        self._storage_key = storage_key
        self._max_entries = max_entries
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, SemanticCacheEntry]" = OrderedDict()
        self._lock = asyncio.Lock()
        self._loaded = False

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, query: str) -> bool:
        return normalize_name(query) in self._entries

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> int:
        """
        Load persisted mappings into memory.

        Returns:
            Number of entries loaded

        Raises:
            EngineInitializationError: If the store cannot be read at all
        """
        try:
            raw = await self._store.get(self._storage_key)
        except Exception as e:
            raise EngineInitializationError(
                f"Semantic cache store unreachable: {e}"
            ) from e

        self._entries.clear()
        self._loaded = True
        if not raw:
            return 0

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt semantic cache payload: {e}")
            return 0

        if not isinstance(data, dict):
            logger.warning(
                f"Ignoring semantic cache payload of type {type(data).__name__}"
            )
            return 0

        now = self._clock()
        for query, alternatives in data.items():
            names = _coerce_alternatives(alternatives)
            if not names:
                continue
            key = normalize_name(query)
            self._entries[key] = SemanticCacheEntry(
                query_key=key,
                alternatives=names,
                cached_at=now,
            )
        self._evict_overflow()

        logger.info(f"Loaded {len(self._entries)} semantic mappings from cache")
        return len(self._entries)

    async def get(self, query: str) -> Optional[SemanticCacheEntry]:
        """
        Return the entry for a query (refreshing its recency), or None.

        An expired entry is removed and the removal persisted, so it does not
        come back on the next load.
        """
        key = normalize_name(query)
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._is_expired(entry):
            logger.debug(f"Semantic cache entry for '{key}' expired")
            async with self._lock:
                if self._entries.get(key) is entry:
                    del self._entries[key]
                    await self._persist()
            return None

        self._entries.move_to_end(key)
        return entry

    async def put(
        self,
        query: str,
        alternatives: Iterable[str],
        classification: Optional[MovementClassification] = None,
    ) -> Optional[SemanticCacheEntry]:
        """Insert or replace a mapping and persist the whole cache."""
        names = _coerce_alternatives(list(alternatives))
        if not names:
            return None

        key = normalize_name(query)
        entry = SemanticCacheEntry(
            query_key=key,
            alternatives=names,
            classification=classification,
            cached_at=self._clock(),
        )

        async with self._lock:
            self._entries[key] = entry
            self._entries.move_to_end(key)
            self._evict_overflow()
            await self._persist()
        return entry

    async def invalidate(self, query: str) -> bool:
        """Drop a single mapping. Returns True if it existed."""
        key = normalize_name(query)
        async with self._lock:
            if self._entries.pop(key, None) is None:
                return False
            await self._persist()
        return True

    async def clear(self) -> None:
        """Empty the cache and remove the persisted copy."""
        async with self._lock:
            self._entries.clear()
            try:
                await self._store.delete(self._storage_key)
            except Exception as e:
                logger.warning(f"Failed to delete persisted semantic cache: {e}")
        logger.info("Semantic cache cleared")

    def to_mapping(self) -> Dict[str, list]:
        """Flat mapping in persisted form (oldest first)."""
        return {key: list(entry.alternatives) for key, entry in self._entries.items()}

    def _is_expired(self, entry: SemanticCacheEntry) -> bool:
        if self._ttl_seconds is None:
            return False
        return self._clock() - entry.cached_at > self._ttl_seconds

    def _evict_overflow(self) -> None:
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted semantic cache entry '{evicted}'")

    async def _persist(self) -> None:
        try:
            await self._store.set(self._storage_key, json.dumps(self.to_mapping()))
        except Exception as e:
            logger.warning(f"Failed to save semantic cache: {e}")


def _coerce_alternatives(value) -> tuple:
    """Accept a list of names (or legacy objects with a 'name' / 'alternatives')."""
    if isinstance(value, dict):
        value = value.get("alternatives", [])
    if not isinstance(value, list):
        return ()

    names = []
    for item in value:
        if isinstance(item, dict):
            item = item.get("name")
        if isinstance(item, str) and item.strip() and item.strip() not in names:
            names.append(item.strip())
    return tuple(names)
