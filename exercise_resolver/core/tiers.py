"""
Tier handlers for the resolution pipeline.

Each tier exposes ``name`` and ``async resolve(query)`` returning a TierMatch
when it accepts, or None to hand over to the next tier. Tiers may raise; the
orchestrator treats any exception as a miss. The generated tier is terminal and
always returns a match.
"""
import dataclasses
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from exercise_resolver.ai.prompts import generated_exercise_prompt, semantic_mapping_prompt
from exercise_resolver.ai.schemas import GeneratedExercise, SemanticMapping
from exercise_resolver.ai.structured import request_structured
from exercise_resolver.core.models import (
    CatalogMatch,
    ExerciseRecord,
    MatchKind,
    MovementClassification,
    SAFE_FORM_INSTRUCTIONS,
    TierMatch,
    TierName,
)
from exercise_resolver.core.normalize import display_name, exercise_id_from_name, normalize_name
from exercise_resolver.core.patterns import PATTERN_RULES, PatternRule, classify_exercise
from exercise_resolver.core.semantic_cache import SemanticCache

if TYPE_CHECKING:
    from application.ports import ExerciseCatalog, GenerativeModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionQuery:
    """One caller input in the three forms the tiers need."""
    raw: str
    normalized: str
    display: str

    @classmethod
    def from_input(cls, name: object) -> "ResolutionQuery":
        raw = name if isinstance(name, str) else ("" if name is None else str(name))
        return cls(raw=raw, normalized=normalize_name(raw), display=display_name(raw))

    @property
    def is_empty(self) -> bool:
        return not self.normalized


class ExactTier:
    """Tier 1: accept only a catalog-reported exact match."""

    name = TierName.EXACT

    def __init__(self, catalog: "ExerciseCatalog"):
        self._catalog = catalog

    async def resolve(self, query: ResolutionQuery) -> Optional[TierMatch]:
        match = await self._catalog.lookup(query.normalized, fuzzy=False)
        if match is None or match.match_kind != MatchKind.EXACT:
            return None

        logger.debug(f"Exact match: '{query.raw}' -> '{match.record.id}'")
        return TierMatch(
            record=match.record,
            confidence=match.confidence,
            match_kind=MatchKind.EXACT,
        )


class FuzzyTier:
    """Tier 2: accept the catalog's approximate match above a confidence floor."""

    name = TierName.FUZZY

    def __init__(self, catalog: "ExerciseCatalog", threshold: float = 0.75):
        self._catalog = catalog
        self._threshold = threshold

    async def resolve(self, query: ResolutionQuery) -> Optional[TierMatch]:
        match = await self._catalog.lookup(query.normalized, fuzzy=True)
        if match is None or match.confidence < self._threshold:
            return None

        logger.debug(
            f"Fuzzy match: '{query.raw}' -> '{match.record.id}' ({match.confidence:.2f})"
        )
        return TierMatch(
            record=match.record,
            confidence=match.confidence,
            match_kind=match.match_kind,
        )


class SemanticTier:
    """
    Tier 3: map free text to standard exercise names via the generative model.

    Mappings that resolve are cached (winner first) so later calls skip the
    generative call. Failed attempts are never cached.
    """

    name = TierName.SEMANTIC

    def __init__(
        self,
        catalog: "ExerciseCatalog",
        generator: Optional["GenerativeModel"],
        cache: SemanticCache,
        threshold: float = 0.70,
        confidence_boost: float = 0.10,
    ):
        self._catalog = catalog
        self._generator = generator
        self._cache = cache
        self._threshold = threshold
        self._boost = confidence_boost

    async def resolve(self, query: ResolutionQuery) -> Optional[TierMatch]:
        cached = await self._cache.get(query.normalized)
        if cached is not None and cached.top_alternative:
            match = await self._lookup_alternative(cached.top_alternative)
            if match is not None:
                logger.debug(
                    f"Semantic cache hit: '{query.raw}' -> '{cached.top_alternative}'"
                )
                return self._boosted(match)
            logger.info(
                f"Cached alternative '{cached.top_alternative}' no longer resolves; "
                f"regenerating mapping for '{query.normalized}'"
            )
            await self._cache.invalidate(query.normalized)

        if self._generator is None:
            return None

        result = await request_structured(
            self._generator,
            semantic_mapping_prompt(query.display),
            SemanticMapping,
        )
        if not result.ok:
            return None

        mapping = result.value
        names = mapping.names
        for alternative in names:
            match = await self._lookup_alternative(alternative)
            if match is None:
                continue

            ordered = [alternative] + [n for n in names if n != alternative]
            await self._cache.put(
                query.normalized,
                ordered,
                classification=MovementClassification(
                    primary_movement=mapping.primary_movement,
                    equipment=mapping.equipment[0] if mapping.equipment else "bodyweight",
                ),
            )
            logger.debug(
                f"Semantic match: '{query.raw}' -> '{alternative}' ({match.confidence:.2f})"
            )
            return self._boosted(match)

        logger.debug(f"No semantic alternative resolved for '{query.raw}': {names}")
        return None

    async def _lookup_alternative(self, alternative: str) -> Optional[CatalogMatch]:
        match = await self._catalog.lookup(normalize_name(alternative), fuzzy=True)
        if match is None or match.confidence < self._threshold:
            return None
        return match

    def _boosted(self, match: CatalogMatch) -> TierMatch:
        return TierMatch(
            record=match.record,
            confidence=min(match.confidence + self._boost, 1.0),
            match_kind=MatchKind.FUZZY,
        )


class ClassificationTier:
    """Tier 4: keyword movement patterns resolved to a representative exercise."""

    name = TierName.CLASSIFICATION

    def __init__(
        self,
        catalog: "ExerciseCatalog",
        confidence: float = 0.6,
        rules: Tuple[PatternRule, ...] = PATTERN_RULES,
    ):
        self._catalog = catalog
        self._confidence = confidence
        self._rules = rules

    async def resolve(self, query: ResolutionQuery) -> Optional[TierMatch]:
        rule = classify_exercise(query.normalized, self._rules)
        if rule is None:
            return None

        match = await self._catalog.lookup(rule.fallback_exercise_name, fuzzy=True)
        if match is None:
            logger.debug(
                f"Pattern fallback '{rule.fallback_exercise_name}' not in catalog"
            )
            return None

        fallback = match.record
        record = dataclasses.replace(
            fallback,
            id=exercise_id_from_name(query.raw),
            name=f"{query.raw} (similar to {fallback.name})",
            instructions=(
                f"This is a variation of {fallback.name}.",
                f'Follow the demonstration while adapting for "{query.raw}".',
            ) + fallback.instructions,
        )
        return TierMatch(
            record=record,
            confidence=self._confidence,
            match_kind=MatchKind.PARTIAL,
        )


class GeneratedTier:
    """
    Tier 5: synthesize exercise content when nothing else matched.

    Never returns None. Degrades from generated content with a borrowed visual,
    to generated content alone, to a minimal boilerplate record.
    """

    name = TierName.GENERATED

    def __init__(
        self,
        catalog: "ExerciseCatalog",
        generator: Optional["GenerativeModel"],
        confidence: float = 0.5,
        degraded_confidence: float = 0.4,
        minimal_confidence: float = 0.1,
        rules: Tuple[PatternRule, ...] = PATTERN_RULES,
    ):
        self._catalog = catalog
        self._generator = generator
        self._confidence = confidence
        self._degraded_confidence = degraded_confidence
        self._minimal_confidence = minimal_confidence
        self._rules = rules

    async def resolve(self, query: ResolutionQuery) -> TierMatch:
        if query.is_empty:
            return self.minimal(query)

        rule = classify_exercise(query.normalized, self._rules)

        if self._generator is not None:
            result = await request_structured(
                self._generator,
                generated_exercise_prompt(query.display),
                GeneratedExercise,
            )
            if result.ok:
                try:
                    return await self._package(query, result.value, rule)
                except Exception as e:
                    logger.warning(f"Packaging generated exercise failed for '{query.raw}': {e}")
                    return TierMatch(
                        record=self._record_from_generated(query, result.value, visual=None),
                        confidence=self._degraded_confidence,
                        match_kind=MatchKind.PARTIAL,
                    )

        borrowed = await self._borrow_pattern_fallback(query, rule)
        if borrowed is not None:
            return borrowed
        return self.minimal(query)

    def minimal(self, query: ResolutionQuery) -> TierMatch:
        """Boilerplate record used when no collaborator contributed anything."""
        record = ExerciseRecord.create(
            id=exercise_id_from_name(query.raw) or "unknown",
            name=query.display or "Unknown Exercise",
            instructions=(
                "This is a custom exercise; no demonstration is available.",
            ) + SAFE_FORM_INSTRUCTIONS,
        )
        return TierMatch(
            record=record,
            confidence=self._minimal_confidence,
            match_kind=MatchKind.PARTIAL,
        )

    async def _package(
        self,
        query: ResolutionQuery,
        generated: GeneratedExercise,
        rule: Optional[PatternRule],
    ) -> TierMatch:
        visual: Optional[ExerciseRecord] = None
        for alternative in generated.alternatives:
            match = await self._catalog.lookup(normalize_name(alternative), fuzzy=True)
            if match is not None:
                visual = match.record
                break

        if visual is None and rule is not None:
            match = await self._catalog.lookup(rule.fallback_exercise_name, fuzzy=True)
            if match is not None:
                visual = match.record

        return TierMatch(
            record=self._record_from_generated(query, generated, visual),
            confidence=self._confidence,
            match_kind=MatchKind.PARTIAL,
        )

    def _record_from_generated(
        self,
        query: ResolutionQuery,
        generated: GeneratedExercise,
        visual: Optional[ExerciseRecord],
    ) -> ExerciseRecord:
        return ExerciseRecord.create(
            id=exercise_id_from_name(query.raw),
            name=generated.name,
            visual_ref=visual.visual_ref if visual else None,
            target_muscles=generated.target_muscles or (visual.target_muscles if visual else None),
            secondary_muscles=visual.secondary_muscles if visual else None,
            equipment=generated.equipment,
            instructions=generated.instructions,
            description=generated.description,
            safety_tips=generated.safety_tips,
            ai_generated=True,
        )

    async def _borrow_pattern_fallback(
        self,
        query: ResolutionQuery,
        rule: Optional[PatternRule],
    ) -> Optional[TierMatch]:
        """
        Use the pattern's stand-in exercise for visual and muscles, if it resolves.

        In the pipeline this only runs when the classification tier's lookup of
        the same stand-in raised, so it is a second attempt against a catalog
        that failed intermittently.
        """
        if rule is None:
            return None
        try:
            match = await self._catalog.lookup(rule.fallback_exercise_name, fuzzy=True)
        except Exception as e:
            logger.warning(f"Pattern fallback lookup failed for '{query.raw}': {e}")
            return None
        if match is None:
            return None

        fallback = match.record
        record = ExerciseRecord.create(
            id=exercise_id_from_name(query.raw),
            name=query.display,
            visual_ref=fallback.visual_ref,
            target_muscles=fallback.target_muscles,
            secondary_muscles=fallback.secondary_muscles,
            body_parts=fallback.body_parts,
            equipment=fallback.equipment,
            instructions=(
                f'No exact demonstration was found for "{query.display}"; '
                f"the visual shows {fallback.name}.",
            ) + SAFE_FORM_INSTRUCTIONS,
        )
        return TierMatch(
            record=record,
            confidence=self._degraded_confidence,
            match_kind=MatchKind.PARTIAL,
        )
