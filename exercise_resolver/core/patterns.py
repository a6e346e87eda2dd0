"""
Movement-pattern classification table.

Rules are evaluated in table order and the first rule with a keyword contained
in the input wins. Keywords are plain substrings, so "explosive_jump_squat"
hits the squat rule before the cardio rule ever sees "jump". Keep more specific
rules above more general ones when their keywords can overlap.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from exercise_resolver.core.models import MovementClassification, MovementPattern
from exercise_resolver.core.normalize import normalize_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternRule:
    """Keyword rule mapping free text to a movement pattern and a stand-in exercise."""
    keywords: Tuple[str, ...]
    classification: MovementClassification
    fallback_exercise_name: str

    def matches(self, normalized_text: str) -> bool:
        return any(keyword in normalized_text for keyword in self.keywords)


PATTERN_RULES: Tuple[PatternRule, ...] = (
    PatternRule(
        keywords=("push", "press", "chest", "shoulder", "tricep"),
        classification=MovementClassification(
            primary_movement=MovementPattern.PUSH,
            muscle_group="upper",
            equipment="weights",
            intensity="moderate",
        ),
        fallback_exercise_name="push up",
    ),
    PatternRule(
        keywords=("pull", "row", "lat", "back", "bicep", "chin"),
        classification=MovementClassification(
            primary_movement=MovementPattern.PULL,
            muscle_group="upper",
            equipment="weights",
            intensity="moderate",
        ),
        fallback_exercise_name="pull up",
    ),
    PatternRule(
        keywords=("squat", "quad", "glute", "leg", "thigh"),
        classification=MovementClassification(
            primary_movement=MovementPattern.SQUAT,
            muscle_group="lower",
            equipment="weights",
            intensity="moderate",
        ),
        fallback_exercise_name="squat",
    ),
    PatternRule(
        keywords=("deadlift", "hinge", "hamstring", "hip", "posterior"),
        classification=MovementClassification(
            primary_movement=MovementPattern.HINGE,
            muscle_group="lower",
            equipment="weights",
            intensity="moderate",
        ),
        fallback_exercise_name="deadlift",
    ),
    PatternRule(
        keywords=("plank", "core", "abs", "rotation", "twist", "crunch"),
        classification=MovementClassification(
            primary_movement=MovementPattern.ROTATION,
            muscle_group="core",
            equipment="bodyweight",
            intensity="moderate",
        ),
        fallback_exercise_name="plank",
    ),
    PatternRule(
        keywords=("jump", "cardio", "hiit", "explosive", "plyometric", "burpee"),
        classification=MovementClassification(
            primary_movement=MovementPattern.CARRY,
            muscle_group="full-body",
            equipment="cardio",
            intensity="explosive",
        ),
        fallback_exercise_name="jumping jacks",
    ),
)


def classify_exercise(
    exercise_name: str,
    rules: Tuple[PatternRule, ...] = PATTERN_RULES,
) -> Optional[PatternRule]:
    """Return the first rule whose keywords appear in the name, or None."""
    text = normalize_name(exercise_name)
    if not text:
        return None

    for rule in rules:
        if rule.matches(text):
            logger.debug(
                f"Classified '{exercise_name}' as {rule.classification.primary_movement.value}"
            )
            return rule
    return None
