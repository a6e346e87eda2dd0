"""
Collaborator wiring for the resolution engine.

Builds default implementations of the ports from settings. Infrastructure is
imported lazily so the core package stays importable without it.

Usage:
    from exercise_resolver.factory import build_catalog
    from exercise_resolver import create_engine

    engine = await create_engine(catalog=build_catalog())
"""
import logging
from typing import TYPE_CHECKING, Optional

from exercise_resolver.settings import Settings, get_settings

if TYPE_CHECKING:
    from application.ports import ExerciseCatalog, GenerativeModel, KeyValueStore

logger = logging.getLogger(__name__)


def build_generator(settings: Optional[Settings] = None) -> "GenerativeModel":
    """OpenAI-backed generator when an API key is configured, otherwise an unavailable stub."""
    from infrastructure.generative import OpenAIGenerativeModel, UnavailableGenerativeModel

    settings = settings or get_settings()
    if not settings.openai_api_key:
        logger.warning(
            "OpenAI API key not configured. Semantic and generated tiers "
            "will fall back to offline behaviour."
        )
        return UnavailableGenerativeModel("No generative API key configured")

    return OpenAIGenerativeModel.from_settings(settings)


def build_store(settings: Optional[Settings] = None) -> "KeyValueStore":
    """Supabase-backed store when configured, otherwise a local JSON file."""
    from infrastructure.storage import JsonFileKeyValueStore, SupabaseKeyValueStore

    settings = settings or get_settings()
    if settings.supabase_configured:
        from supabase import create_client

        client = create_client(settings.supabase_url, settings.supabase_key)
        logger.info(f"Using Supabase table '{settings.semantic_cache_table}' for semantic cache")
        return SupabaseKeyValueStore(client, table=settings.semantic_cache_table)

    logger.info(f"Using {settings.semantic_cache_path} for semantic cache")
    return JsonFileKeyValueStore(settings.semantic_cache_path)


def build_catalog(settings: Optional[Settings] = None) -> "ExerciseCatalog":
    """In-memory catalog seeded from the YAML dictionary at ``catalog_path``."""
    from infrastructure.catalog import InMemoryExerciseCatalog

    settings = settings or get_settings()
    return InMemoryExerciseCatalog.from_yaml(settings.catalog_path)
