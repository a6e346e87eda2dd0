"""
Unit tests for SemanticCache.
"""
import json

import pytest

from exercise_resolver.core.semantic_cache import SemanticCache
from exercise_resolver.exceptions import EngineInitializationError
from tests.fakes import FakeKeyValueStore


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.mark.unit
class TestLoad:
    """Tests for loading persisted mappings."""

    @pytest.mark.asyncio
    async def test_missing_key_loads_empty(self):
        cache = SemanticCache(FakeKeyValueStore(), storage_key="k")

        assert await cache.load() == 0
        assert cache.loaded

    @pytest.mark.asyncio
    async def test_flat_mapping_loaded_with_normalized_keys(self):
        store = FakeKeyValueStore({"k": json.dumps({"Goblet_Squat": ["goblet squat", "squat"]})})
        cache = SemanticCache(store, storage_key="k")

        assert await cache.load() == 1
        assert "goblet squat" in cache
        assert (await cache.get("goblet squat")).alternatives == ("goblet squat", "squat")

    @pytest.mark.asyncio
    async def test_legacy_object_entries_accepted(self):
        """Entries stored as objects with 'alternatives' of {'name': ...} still load."""
        payload = {"odd lift": {"alternatives": [{"name": "squat"}, {"name": "deadlift"}]}}
        cache = SemanticCache(FakeKeyValueStore({"k": json.dumps(payload)}), storage_key="k")

        await cache.load()

        assert (await cache.get("odd lift")).top_alternative == "squat"

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2, 3]", '"text"'])
    @pytest.mark.asyncio
    async def test_corrupt_payload_treated_as_empty(self, raw):
        cache = SemanticCache(FakeKeyValueStore({"k": raw}), storage_key="k")

        assert await cache.load() == 0
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_unusable_entries_skipped(self):
        payload = {"a": [], "b": "squat", "c": ["", "plank"]}
        cache = SemanticCache(FakeKeyValueStore({"k": json.dumps(payload)}), storage_key="k")

        assert await cache.load() == 1
        assert (await cache.get("c")).alternatives == ("plank",)

    @pytest.mark.asyncio
    async def test_unreachable_store_raises(self):
        store = FakeKeyValueStore()
        store.fail_reads = True

        with pytest.raises(EngineInitializationError):
            await SemanticCache(store).load()

    @pytest.mark.asyncio
    async def test_load_trims_to_capacity(self):
        payload = {f"q{i}": [f"a{i}"] for i in range(5)}
        cache = SemanticCache(FakeKeyValueStore({"k": json.dumps(payload)}), storage_key="k", max_entries=3)

        await cache.load()

        assert len(cache) == 3
        assert "q0" not in cache
        assert "q4" in cache


@pytest.mark.unit
class TestMutation:
    """Tests for put, invalidate and clear."""

    @pytest.mark.asyncio
    async def test_put_persists_flat_mapping(self):
        store = FakeKeyValueStore()
        cache = SemanticCache(store, storage_key="k")

        await cache.put("Odd_Lift", ["squat", "deadlift", "squat"])

        assert json.loads(store.data["k"]) == {"odd lift": ["squat", "deadlift"]}

    @pytest.mark.asyncio
    async def test_put_with_no_names_is_ignored(self):
        store = FakeKeyValueStore()
        cache = SemanticCache(store, storage_key="k")

        assert await cache.put("odd lift", ["  "]) is None
        assert store.set_calls == []

    @pytest.mark.asyncio
    async def test_lru_eviction(self):
        cache = SemanticCache(FakeKeyValueStore(), storage_key="k", max_entries=2)
        await cache.put("a", ["x"])
        await cache.put("b", ["y"])
        await cache.get("a")

        await cache.put("c", ["z"])

        assert "a" in cache
        assert "b" not in cache
        assert "c" in cache

    @pytest.mark.asyncio
    async def test_write_failure_keeps_memory_copy(self):
        """A failed persist is logged; the in-memory mapping still serves."""
        store = FakeKeyValueStore()
        store.fail_writes = True
        cache = SemanticCache(store, storage_key="k")

        await cache.put("odd lift", ["squat"])

        assert (await cache.get("odd lift")).top_alternative == "squat"

    @pytest.mark.asyncio
    async def test_invalidate(self):
        store = FakeKeyValueStore()
        cache = SemanticCache(store, storage_key="k")
        await cache.put("odd lift", ["squat"])

        assert await cache.invalidate("odd lift") is True
        assert await cache.invalidate("odd lift") is False
        assert json.loads(store.data["k"]) == {}

    @pytest.mark.asyncio
    async def test_clear_deletes_persisted_copy(self):
        store = FakeKeyValueStore()
        cache = SemanticCache(store, storage_key="k")
        await cache.put("odd lift", ["squat"])

        await cache.clear()

        assert len(cache) == 0
        assert "k" not in store.data


@pytest.mark.unit
class TestExpiry:
    """Tests for optional TTL expiry."""

    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(self):
        clock = FakeClock()
        cache = SemanticCache(FakeKeyValueStore(), storage_key="k", ttl_seconds=60, clock=clock)
        await cache.put("odd lift", ["squat"])

        clock.now += 30
        assert await cache.get("odd lift") is not None

        clock.now += 31
        assert await cache.get("odd lift") is None
        assert "odd lift" not in cache

    @pytest.mark.asyncio
    async def test_expired_entry_removed_from_store(self):
        """An expired mapping must not come back when the cache is reloaded."""
        clock = FakeClock()
        store = FakeKeyValueStore()
        cache = SemanticCache(store, storage_key="k", ttl_seconds=60, clock=clock)
        await cache.put("goblet", ["squat"])

        clock.now += 61
        assert await cache.get("goblet") is None
        assert json.loads(store.data["k"]) == {}

        reloaded = SemanticCache(store, storage_key="k", ttl_seconds=60, clock=clock)
        assert await reloaded.load() == 0
        assert await reloaded.get("goblet") is None

    @pytest.mark.asyncio
    async def test_expiry_keeps_other_entries_persisted(self):
        clock = FakeClock()
        store = FakeKeyValueStore()
        cache = SemanticCache(store, storage_key="k", ttl_seconds=60, clock=clock)
        await cache.put("goblet", ["squat"])
        clock.now += 30
        await cache.put("odd lift", ["deadlift"])

        clock.now += 31
        assert await cache.get("goblet") is None

        assert json.loads(store.data["k"]) == {"odd lift": ["deadlift"]}

    @pytest.mark.asyncio
    async def test_no_ttl_never_expires(self):
        clock = FakeClock()
        cache = SemanticCache(FakeKeyValueStore(), storage_key="k", clock=clock)
        await cache.put("odd lift", ["squat"])

        clock.now += 10 ** 9

        assert await cache.get("odd lift") is not None


@pytest.mark.unit
class TestValidation:

    def test_max_entries_must_be_positive(self):
        with pytest.raises(ValueError):
            SemanticCache(FakeKeyValueStore(), max_entries=0)

    def test_ttl_must_be_positive(self):
        with pytest.raises(ValueError):
            SemanticCache(FakeKeyValueStore(), ttl_seconds=0)
