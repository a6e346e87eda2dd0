"""
Unit tests for the individual resolution tiers.
"""
import pytest

from exercise_resolver.core.models import MatchKind, TierName
from exercise_resolver.core.semantic_cache import SemanticCache
from exercise_resolver.core.tiers import (
    ClassificationTier,
    ExactTier,
    FuzzyTier,
    GeneratedTier,
    ResolutionQuery,
    SemanticTier,
)
from tests.fakes import FakeExerciseCatalog, FakeGenerativeModel, FakeKeyValueStore, make_record


def q(text):
    return ResolutionQuery.from_input(text)


@pytest.mark.unit
class TestResolutionQuery:
    """Tests for ResolutionQuery.from_input."""

    def test_forms(self):
        query = q("Dumbbell_Goblet-Squat")

        assert query.raw == "Dumbbell_Goblet-Squat"
        assert query.normalized == "dumbbell goblet squat"
        assert query.display == "Dumbbell Goblet-Squat"
        assert not query.is_empty

    def test_none_is_empty(self):
        assert q(None).is_empty
        assert q(None).raw == ""


@pytest.mark.unit
class TestExactTier:
    """Tests for the exact tier."""

    @pytest.mark.asyncio
    async def test_accepts_exact(self, catalog):
        match = await ExactTier(catalog).resolve(q("plank"))

        assert match.match_kind == MatchKind.EXACT
        assert match.record.name == "Plank"
        assert catalog.calls == [("plank", False)]

    @pytest.mark.asyncio
    async def test_miss_returns_none(self, catalog):
        assert await ExactTier(catalog).resolve(q("zercher squat")) is None

    def test_name(self, catalog):
        assert ExactTier(catalog).name == TierName.EXACT


@pytest.mark.unit
class TestFuzzyTier:
    """Tests for the fuzzy tier."""

    @pytest.mark.asyncio
    async def test_threshold_is_inclusive(self, catalog):
        catalog.add_fuzzy("plnk", make_record("Plank"), 0.75)

        match = await FuzzyTier(catalog, threshold=0.75).resolve(q("plnk"))

        assert match is not None
        assert match.confidence == pytest.approx(0.75)

    @pytest.mark.asyncio
    async def test_below_threshold_rejected(self, catalog):
        catalog.add_fuzzy("plnk", make_record("Plank"), 0.74)

        assert await FuzzyTier(catalog, threshold=0.75).resolve(q("plnk")) is None

    @pytest.mark.asyncio
    async def test_passes_catalog_match_kind_through(self, catalog):
        """A catalog-reported partial match stays partial."""
        catalog.add_fuzzy("plank hold", make_record("Plank"), 0.78, kind=MatchKind.PARTIAL)

        match = await FuzzyTier(catalog, threshold=0.75).resolve(q("plank hold"))

        assert match.match_kind == MatchKind.PARTIAL


@pytest.mark.unit
class TestSemanticTier:
    """Tests for the semantic tier."""

    @pytest.fixture
    def tier(self, catalog, generator, cache):
        return SemanticTier(catalog, generator, cache, threshold=0.7, confidence_boost=0.1)

    @pytest.mark.asyncio
    async def test_no_generator_and_no_cache_misses(self, catalog, cache):
        tier = SemanticTier(catalog, None, cache)

        assert await tier.resolve(q("zercher carry")) is None

    @pytest.mark.asyncio
    async def test_confidence_boost_capped_at_one(self, tier, generator):
        generator.script("SemanticMapping", {"alternatives": ["plank"]})

        match = await tier.resolve(q("front lever hold"))

        assert match.confidence == 1.0
        assert match.match_kind == MatchKind.FUZZY

    @pytest.mark.asyncio
    async def test_alternative_below_floor_skipped(self, tier, catalog, generator):
        """Alternatives under the semantic threshold are not accepted."""
        catalog.add_fuzzy("plank variant", make_record("Plank"), 0.65)
        generator.script("SemanticMapping", {"alternatives": ["plank variant", "squat"]})

        match = await tier.resolve(q("odd lift"))

        assert match.record.name == "Squat"

    @pytest.mark.asyncio
    async def test_only_first_three_alternatives_tried(self, tier, catalog, generator):
        generator.script(
            "SemanticMapping",
            {"alternatives": ["nope one", "nope two", "nope three", "plank"]},
        )

        assert await tier.resolve(q("odd lift")) is None
        assert catalog.lookup_count("plank") == 0

    @pytest.mark.asyncio
    async def test_malformed_mapping_misses(self, tier, generator):
        """A response without alternatives fails validation and is treated as a miss."""
        generator.script("SemanticMapping", {"alternatives": []})

        assert await tier.resolve(q("odd lift")) is None

    @pytest.mark.asyncio
    async def test_stale_cache_entry_invalidated_and_regenerated(self, catalog, generator, store):
        """A cached alternative that no longer resolves triggers a fresh mapping."""
        cache = SemanticCache(store, storage_key="k")
        await cache.put("odd lift", ["retired exercise"])
        generator.script("SemanticMapping", {"alternatives": ["squat"]})
        tier = SemanticTier(catalog, generator, cache)

        match = await tier.resolve(q("odd lift"))

        assert match.record.name == "Squat"
        assert generator.call_count("SemanticMapping") == 1
        assert (await cache.get("odd lift")).alternatives == ("squat",)

    @pytest.mark.asyncio
    async def test_cache_entry_stores_classification(self, tier, generator, cache):
        generator.script(
            "SemanticMapping",
            {"alternatives": ["squat"], "primaryMovement": "squat", "equipment": ["kettlebell"]},
        )

        await tier.resolve(q("kb front squat"))

        entry = await cache.get("kb front squat")
        assert entry.classification.primary_movement.value == "squat"
        assert entry.classification.equipment == "kettlebell"


@pytest.mark.unit
class TestClassificationTier:
    """Tests for the movement-pattern tier."""

    @pytest.mark.asyncio
    async def test_no_rule_misses(self, catalog):
        assert await ClassificationTier(catalog).resolve(q("zercher carry hold")) is None

    @pytest.mark.asyncio
    async def test_missing_fallback_misses(self):
        tier = ClassificationTier(FakeExerciseCatalog([]))

        assert await tier.resolve(q("incline press")) is None

    @pytest.mark.asyncio
    async def test_record_uses_fallback_content(self, catalog):
        match = await ClassificationTier(catalog, confidence=0.6).resolve(q("Incline_Press"))

        assert match.confidence == pytest.approx(0.6)
        assert match.match_kind == MatchKind.PARTIAL
        assert match.record.id == "incline_press"
        assert match.record.name == "Incline_Press (similar to Push Up)"
        assert match.record.visual_ref == "https://example.com/push_up.gif"
        assert match.record.instructions[:2] == (
            "This is a variation of Push Up.",
            'Follow the demonstration while adapting for "Incline_Press".',
        )


@pytest.mark.unit
class TestGeneratedTier:
    """Tests for the terminal tier."""

    GENERATED = {
        "name": "Zercher Carry",
        "instructions": ["Cradle the bar", "Walk"],
        "alternatives": ["farmer carry"],
    }

    @pytest.mark.asyncio
    async def test_without_generator_borrows_pattern_visual(self, catalog):
        tier = GeneratedTier(catalog, None, degraded_confidence=0.4)

        match = await tier.resolve(q("cable tricep kickback"))

        assert match.confidence == pytest.approx(0.4)
        assert match.record.name == "cable tricep kickback"
        assert match.record.visual_ref == "https://example.com/push_up.gif"
        assert match.record.ai_generated is False

    @pytest.mark.asyncio
    async def test_generation_failure_without_pattern_is_minimal(self, catalog, generator):
        tier = GeneratedTier(catalog, generator, minimal_confidence=0.1)

        match = await tier.resolve(q("zercher carry"))

        assert match.confidence == pytest.approx(0.1)
        assert match.record.visual_ref == ""
        assert match.record.instructions

    @pytest.mark.asyncio
    async def test_packaging_failure_keeps_generated_content(self, catalog, generator):
        """If visual lookup blows up, the generated content survives at degraded confidence."""
        generator.script("GeneratedExercise", self.GENERATED)
        catalog.raise_on["farmer carry"] = RuntimeError("catalog down")
        tier = GeneratedTier(catalog, generator, degraded_confidence=0.4)

        match = await tier.resolve(q("zercher carry"))

        assert match.confidence == pytest.approx(0.4)
        assert match.record.ai_generated is True
        assert match.record.instructions == ("Cradle the bar", "Walk")
        assert match.record.visual_ref == ""

    @pytest.mark.asyncio
    async def test_pattern_fallback_visual_when_alternatives_miss(self, catalog, generator):
        generator.script(
            "GeneratedExercise",
            {"name": "Landmine Press", "instructions": ["Press the bar"], "alternatives": ["nope"]},
        )
        tier = GeneratedTier(catalog, generator, confidence=0.5)

        match = await tier.resolve(q("landmine press"))

        assert match.confidence == pytest.approx(0.5)
        assert match.record.visual_ref == "https://example.com/push_up.gif"

    def test_minimal_record_defaults(self, catalog):
        match = GeneratedTier(catalog, None).minimal(q("Sled Drag"))

        assert match.record.id == "sled_drag"
        assert match.record.name == "Sled Drag"
        assert match.record.target_muscles == ("full body",)
        assert match.record.equipment == ("bodyweight",)
        assert len(match.record.instructions) > 1
