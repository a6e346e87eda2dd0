"""
Infrastructure layer for the exercise resolver.

This package contains concrete implementations of the application ports:
- catalog/: In-memory exercise catalog seeded from YAML
- generative/: OpenAI-backed structured generation
- storage/: Key-value stores for the semantic cache (Supabase, JSON file)
"""

from infrastructure.catalog import InMemoryExerciseCatalog
from infrastructure.generative import OpenAIGenerativeModel, UnavailableGenerativeModel
from infrastructure.storage import JsonFileKeyValueStore, SupabaseKeyValueStore

__all__ = [
    "InMemoryExerciseCatalog",
    "OpenAIGenerativeModel",
    "UnavailableGenerativeModel",
    "JsonFileKeyValueStore",
    "SupabaseKeyValueStore",
]
