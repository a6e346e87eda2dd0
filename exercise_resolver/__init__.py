"""
Exercise resolution engine.

Maps free-text (often AI-generated) exercise names to concrete exercise records
through a five-tier fallback pipeline: exact, fuzzy, semantic, classification
and generated.

Usage:
    from exercise_resolver import create_engine

    engine = await create_engine(catalog=my_catalog)
    result = await engine.resolve_exercise("dumbbell_goblet_squat")
"""
from exercise_resolver.core.engine import ExerciseResolutionEngine, create_engine
from exercise_resolver.core.models import (
    ExerciseRecord,
    MatchKind,
    MatchResult,
    PerformanceMetrics,
    TierName,
)

__all__ = [
    "ExerciseResolutionEngine",
    "create_engine",
    "ExerciseRecord",
    "MatchKind",
    "MatchResult",
    "PerformanceMetrics",
    "TierName",
]
