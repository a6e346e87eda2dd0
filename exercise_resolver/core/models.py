"""
Domain types for exercise resolution.

ExerciseRecord is the canonical resolved entity; MatchResult is the envelope
handed back to callers. Both are immutable once built.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Optional, Sequence, Tuple


class MatchKind(str, Enum):
    """Coarse quality signal, independent of which tier produced the match."""
    EXACT = "exact"
    FUZZY = "fuzzy"
    PARTIAL = "partial"


class TierName(str, Enum):
    """Pipeline stage that produced a result, in priority order."""
    EXACT = "exact"
    FUZZY = "fuzzy"
    SEMANTIC = "semantic"
    CLASSIFICATION = "classification"
    GENERATED = "generated"


DEFAULT_TARGET_MUSCLES: Tuple[str, ...] = ("full body",)
DEFAULT_EQUIPMENT: Tuple[str, ...] = ("bodyweight",)
SAFE_FORM_INSTRUCTIONS: Tuple[str, ...] = (
    "Follow proper form and technique.",
    "Start with light weight or bodyweight.",
    "Focus on controlled movements.",
    "Breathe steadily throughout the movement.",
    "Stop if you feel any pain or discomfort.",
)

MUSCLE_TO_BODY_PART: Dict[str, str] = {
    "chest": "chest",
    "pectorals": "chest",
    "back": "back",
    "lats": "back",
    "latissimus dorsi": "back",
    "traps": "back",
    "lower back": "back",
    "shoulders": "shoulders",
    "deltoids": "shoulders",
    "delts": "shoulders",
    "biceps": "upper arms",
    "triceps": "upper arms",
    "forearms": "lower arms",
    "legs": "lower body",
    "glutes": "lower body",
    "quadriceps": "upper legs",
    "quads": "upper legs",
    "hamstrings": "upper legs",
    "calves": "lower legs",
    "core": "waist",
    "abs": "waist",
    "obliques": "waist",
    "cardiovascular": "cardio",
    "cardiovascular system": "cardio",
}


def _clean(values: Optional[Iterable[str]]) -> Tuple[str, ...]:
    """Strip blanks and duplicates while keeping order."""
    seen = []
    for value in values or ():
        if not isinstance(value, str):
            continue
        value = value.strip()
        if value and value not in seen:
            seen.append(value)
    return tuple(seen)


def map_muscles_to_body_parts(muscles: Sequence[str]) -> Tuple[str, ...]:
    """Map muscle labels to coarse body regions; unknown labels become 'full body'."""
    parts = [MUSCLE_TO_BODY_PART.get(m.strip().lower(), "full body") for m in muscles]
    return _clean(parts) or DEFAULT_TARGET_MUSCLES


@dataclass(frozen=True)
class ExerciseRecord:
    """
    Canonical resolved exercise.

    Build instances through ``ExerciseRecord.create`` so the non-empty
    invariants (muscles, equipment, instructions) always hold.
    """
    id: str
    name: str
    visual_ref: str
    target_muscles: Tuple[str, ...]
    secondary_muscles: Tuple[str, ...]
    body_parts: Tuple[str, ...]
    equipment: Tuple[str, ...]
    instructions: Tuple[str, ...]
    description: Optional[str] = None
    safety_tips: Tuple[str, ...] = ()
    ai_generated: bool = False

    @classmethod
    def create(
        cls,
        *,
        id: str,
        name: str,
        visual_ref: Optional[str] = None,
        target_muscles: Optional[Iterable[str]] = None,
        secondary_muscles: Optional[Iterable[str]] = None,
        body_parts: Optional[Iterable[str]] = None,
        equipment: Optional[Iterable[str]] = None,
        instructions: Optional[Iterable[str]] = None,
        description: Optional[str] = None,
        safety_tips: Optional[Iterable[str]] = None,
        ai_generated: bool = False,
    ) -> "ExerciseRecord":
        """Build a record, substituting defaults for missing content."""
        targets = _clean(target_muscles) or DEFAULT_TARGET_MUSCLES
        return cls(
            id=id,
            name=name,
            visual_ref=visual_ref or "",
            target_muscles=targets,
            secondary_muscles=_clean(secondary_muscles),
            body_parts=_clean(body_parts) or map_muscles_to_body_parts(targets),
            equipment=_clean(equipment) or DEFAULT_EQUIPMENT,
            instructions=_clean(instructions) or SAFE_FORM_INSTRUCTIONS,
            description=description or None,
            safety_tips=_clean(safety_tips),
            ai_generated=ai_generated,
        )


def _validate_confidence(confidence: float) -> None:
    if not 0.0 <= confidence <= 1.0:
        raise ValueError(f"Confidence must be between 0.0 and 1.0, got {confidence}")


@dataclass(frozen=True)
class CatalogMatch:
    """What the catalog returns for a lookup."""
    record: ExerciseRecord
    confidence: float
    match_kind: MatchKind

    def __post_init__(self):
        _validate_confidence(self.confidence)


@dataclass(frozen=True)
class TierMatch:
    """An accepted match from a single tier, before timing is attached."""
    record: ExerciseRecord
    confidence: float
    match_kind: MatchKind

    def __post_init__(self):
        _validate_confidence(self.confidence)


@dataclass(frozen=True)
class MatchResult:
    """
    Result envelope returned by ``resolve_exercise``.

    Attributes:
        record: The resolved exercise
        confidence: Certainty that ``record`` is the requested exercise (0.0-1.0)
        match_kind: Coarse quality signal (exact, fuzzy, partial)
        tier: Stage that produced the result; informative only
        elapsed_ms: Wall-clock duration of the whole pipeline call
    """
    record: ExerciseRecord
    confidence: float
    match_kind: MatchKind
    tier: TierName
    elapsed_ms: float

    def __post_init__(self):
        _validate_confidence(self.confidence)


class MovementPattern(str, Enum):
    PUSH = "push"
    PULL = "pull"
    SQUAT = "squat"
    HINGE = "hinge"
    CARRY = "carry"
    ROTATION = "rotation"
    ISOLATION = "isolation"


@dataclass(frozen=True)
class MovementClassification:
    """Movement, muscle-group, equipment and intensity tags for an exercise."""
    primary_movement: MovementPattern
    muscle_group: str = "full-body"
    equipment: str = "bodyweight"
    intensity: str = "moderate"


@dataclass(frozen=True)
class SemanticCacheEntry:
    """Persisted mapping from a normalized query to suggested standard names."""
    query_key: str
    alternatives: Tuple[str, ...]
    classification: Optional[MovementClassification] = None
    cached_at: float = 0.0

    @property
    def top_alternative(self) -> Optional[str]:
        return self.alternatives[0] if self.alternatives else None


@dataclass(frozen=True)
class PerformanceMetrics:
    """Read-only snapshot of process-wide resolution metrics."""
    total_requests: int
    tier_usage_counts: Dict[str, int] = field(default_factory=dict)
    average_elapsed_ms: float = 0.0
    cache_size: int = 0
    coverage_rate: float = 0.0
