"""
Exercise Catalog Interface (Port).

This module defines the abstract interface for the visual exercise catalog.
Implementations own their fuzzy string matching; the resolution engine only
sees a single best match (or nothing) per lookup.
"""
from typing import Optional, Protocol

from exercise_resolver.core.models import CatalogMatch


class ExerciseCatalog(Protocol):
    """
    Abstract interface for looking up exercises with demonstration visuals.

    Used by every tier of the resolution pipeline.
    """

    async def lookup(self, name: str, fuzzy: bool = False) -> Optional[CatalogMatch]:
        """
        Look up a single exercise by name.

        Args:
            name: Normalized exercise name
            fuzzy: If False, only literal/normalized matches are returned.
                   If True, the catalog may return its best approximate match.

        Returns:
            CatalogMatch with record, confidence and match kind, or None
        """
        ...
