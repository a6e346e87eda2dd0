"""
Collaborator Interfaces (Ports) for the exercise resolution engine.

This package defines abstract interfaces that decouple the resolution tiers
from the services they depend on. Implementations are provided in
infrastructure/ (and as in-memory fakes in tests/fakes/).

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the engine needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import ExerciseCatalog, GenerativeModel, KeyValueStore

    engine = ExerciseResolutionEngine(
        catalog=catalog, generator=generator, cache=SemanticCache(store),
    )
"""

# Visual exercise catalog
from application.ports.exercise_catalog import ExerciseCatalog

# Structured generation
from application.ports.generative_model import GenerativeModel, GenerationResponse

# Durable storage for the semantic cache
from application.ports.key_value_store import KeyValueStore

__all__ = [
    "ExerciseCatalog",
    "GenerativeModel",
    "GenerationResponse",
    "KeyValueStore",
]
