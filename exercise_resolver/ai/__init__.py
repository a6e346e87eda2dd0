"""Generative model boundary: schemas, prompts, validation, client and retry helpers."""
from exercise_resolver.ai.schemas import GeneratedExercise, SemanticAlternative, SemanticMapping
from exercise_resolver.ai.structured import ParseResult, parse_payload, request_structured

__all__ = [
    "GeneratedExercise",
    "SemanticAlternative",
    "SemanticMapping",
    "ParseResult",
    "parse_payload",
    "request_structured",
]
