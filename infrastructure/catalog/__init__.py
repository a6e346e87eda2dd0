"""Exercise catalog implementations."""

from infrastructure.catalog.in_memory_catalog import InMemoryExerciseCatalog

__all__ = ["InMemoryExerciseCatalog"]
