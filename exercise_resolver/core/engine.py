"""
Exercise resolution pipeline orchestrator.

This service maps free-text exercise names to exercise records using a
five-tier fallback approach, stopping at the first tier that accepts:
1. Exact catalog match (catalog confidence)
2. Fuzzy catalog match (catalog confidence >= fuzzy_threshold)
3. Semantic match via generative alternatives (+ boost, cached)
4. Movement-pattern classification (fixed mid confidence)
5. Generated exercise content (always accepts, low confidence)

``resolve_exercise`` never raises; degraded quality is signalled through
confidence, tier and match kind.
"""
import logging
import time
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from exercise_resolver.core.metrics import MetricsTracker
from exercise_resolver.core.models import MatchResult, PerformanceMetrics, TierMatch, TierName
from exercise_resolver.core.patterns import PATTERN_RULES, PatternRule
from exercise_resolver.core.semantic_cache import SemanticCache
from exercise_resolver.core.tiers import (
    ClassificationTier,
    ExactTier,
    FuzzyTier,
    GeneratedTier,
    ResolutionQuery,
    SemanticTier,
)
from exercise_resolver.exceptions import EngineInitializationError
from exercise_resolver.settings import Settings, get_settings

if TYPE_CHECKING:
    from application.ports import ExerciseCatalog, GenerativeModel, KeyValueStore

logger = logging.getLogger(__name__)


class ExerciseResolutionEngine:
    """
    Resolves exercise names through the tier pipeline.

    The engine owns its semantic cache and metrics; collaborators are injected.
    Use ``create_engine`` to build one with a loaded cache.
    """

    def __init__(
        self,
        catalog: "ExerciseCatalog",
        cache: SemanticCache,
        generator: Optional["GenerativeModel"] = None,
        settings: Optional[Settings] = None,
        rules: Tuple[PatternRule, ...] = PATTERN_RULES,
        metrics: Optional[MetricsTracker] = None,
    ):
        """
        Initialize the engine.

        Args:
            catalog: Exercise catalog collaborator
            cache: Semantic cache (load it before the first call)
            generator: Generative model; None disables semantic and generated content
            settings: Thresholds and confidence constants (defaults to get_settings())
            rules: Ordered movement-pattern table
            metrics: Metrics tracker, for sharing across engines
        """
        settings = settings or get_settings()
        self._cache = cache
        self._metrics = metrics or MetricsTracker()

        self._tiers = (
            ExactTier(catalog),
            FuzzyTier(catalog, threshold=settings.fuzzy_threshold),
            SemanticTier(
                catalog,
                generator,
                cache,
                threshold=settings.semantic_threshold,
                confidence_boost=settings.semantic_confidence_boost,
            ),
            ClassificationTier(
                catalog,
                confidence=settings.classification_confidence,
                rules=rules,
            ),
        )
        self._terminal = GeneratedTier(
            catalog,
            generator,
            confidence=settings.generated_confidence,
            degraded_confidence=settings.generated_degraded_confidence,
            minimal_confidence=settings.generated_minimal_confidence,
            rules=rules,
        )

    @property
    def tiers(self) -> Tuple[object, ...]:
        """All tier handlers in priority order (the last one is terminal)."""
        return self._tiers + (self._terminal,)

    @property
    def semantic_cache(self) -> SemanticCache:
        return self._cache

    async def resolve_exercise(self, name: str) -> MatchResult:
        """
        Resolve a free-text exercise name.

        Args:
            name: Exercise name, e.g. "dumbbell_goblet_squat"

        Returns:
            MatchResult; never raises
        """
        start = time.perf_counter()
        query = ResolutionQuery.from_input(name)

        match: Optional[TierMatch] = None
        tier = TierName.GENERATED

        if query.is_empty:
            logger.debug("Empty exercise name; returning minimal record")
        else:
            for handler in self._tiers:
                match = await self._run_tier(handler, query)
                if match is not None:
                    tier = handler.name
                    break

        if match is None:
            match = await self._run_terminal(query)

        elapsed_ms = (time.perf_counter() - start) * 1000
        self._metrics.record(tier, elapsed_ms)

        logger.debug(
            f"Resolved '{query.raw}' via {tier.value} tier "
            f"(confidence: {match.confidence:.2f}, {elapsed_ms:.1f}ms)"
        )
        return MatchResult(
            record=match.record,
            confidence=match.confidence,
            match_kind=match.match_kind,
            tier=tier,
            elapsed_ms=elapsed_ms,
        )

    async def resolve_many(self, names: Sequence[str]) -> List[MatchResult]:
        """
        Resolve multiple exercise names in order.

        Args:
            names: Exercise names

        Returns:
            List of MatchResults in the same order
        """
        return [await self.resolve_exercise(name) for name in names]

    def get_metrics(self) -> PerformanceMetrics:
        """Read-only snapshot of resolution metrics."""
        return self._metrics.snapshot(cache_size=len(self._cache))

    def reset_metrics(self) -> None:
        self._metrics.reset()

    async def clear_semantic_cache(self) -> None:
        """Administrative reset of the semantic cache (memory and storage)."""
        await self._cache.clear()

    async def _run_tier(self, handler, query: ResolutionQuery) -> Optional[TierMatch]:
        try:
            return await handler.resolve(query)
        except Exception as e:
            logger.error(
                f"{handler.name.value} tier failed for '{query.raw}': {e}",
                exc_info=True,
            )
            return None

    async def _run_terminal(self, query: ResolutionQuery) -> TierMatch:
        try:
            return await self._terminal.resolve(query)
        except Exception as e:
            logger.error(
                f"Generated tier failed for '{query.raw}': {e}",
                exc_info=True,
            )
            return self._terminal.minimal(query)


async def create_engine(
    catalog: "ExerciseCatalog",
    generator: Optional["GenerativeModel"] = None,
    store: Optional["KeyValueStore"] = None,
    settings: Optional[Settings] = None,
) -> ExerciseResolutionEngine:
    """
    Build an engine and load its semantic cache.

    Args:
        catalog: Exercise catalog collaborator
        generator: Generative model (defaults to one built from settings)
        store: Durable store for the semantic cache (defaults to one built from settings)
        settings: Settings override

    Returns:
        Ready-to-use ExerciseResolutionEngine

    Raises:
        EngineInitializationError: If the durable store is unreachable
    """
    from exercise_resolver.factory import build_generator, build_store

    settings = settings or get_settings()
    if generator is None:
        generator = build_generator(settings)
    if store is None:
        try:
            store = build_store(settings)
        except Exception as e:
            raise EngineInitializationError(f"Could not create semantic cache store: {e}") from e

    cache = SemanticCache(
        store,
        storage_key=settings.semantic_cache_key,
        max_entries=settings.semantic_cache_max_entries,
        ttl_seconds=settings.semantic_cache_ttl_seconds,
    )
    await cache.load()

    return ExerciseResolutionEngine(
        catalog=catalog,
        cache=cache,
        generator=generator,
        settings=settings,
    )
