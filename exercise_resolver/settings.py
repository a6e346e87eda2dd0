"""
Engine configuration loaded from the environment (and .env) with pydantic-settings.

Confidence constants and thresholds are empirical tuning values, so they are
exposed as configuration rather than hard-coded in the tiers.

Usage:
    from exercise_resolver.settings import get_settings, Settings

    settings = get_settings()
    print(settings.fuzzy_threshold)

    # Tests
    settings = Settings(environment="test", _env_file=None)
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production, test",
    )

    # -------------------------------------------------------------------------
    # Generative Model - OpenAI
    # -------------------------------------------------------------------------
    openai_api_key: Optional[str] = Field(
        default=None,
        description="OpenAI API key for semantic matching and exercise generation",
    )
    generative_model: str = Field(
        default="gpt-4o-mini",
        description="Chat model used for structured generation",
    )
    generative_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout for the generative model",
    )
    generative_max_attempts: int = Field(
        default=2,
        ge=1,
        description="Attempts per generative call for transient errors",
    )

    # -------------------------------------------------------------------------
    # Tier Thresholds
    # -------------------------------------------------------------------------
    fuzzy_threshold: float = Field(
        default=0.75,
        description="Minimum catalog confidence to accept a fuzzy match",
    )
    semantic_threshold: float = Field(
        default=0.70,
        description="Minimum catalog confidence for a semantic alternative",
    )
    semantic_confidence_boost: float = Field(
        default=0.10,
        description="Added to an accepted semantic match (capped at 1.0)",
    )
    classification_confidence: float = Field(
        default=0.6,
        description="Fixed confidence for pattern classification matches",
    )
    generated_confidence: float = Field(
        default=0.5,
        description="Confidence for a fully generated and packaged record",
    )
    generated_degraded_confidence: float = Field(
        default=0.4,
        description="Confidence when generation or packaging partially failed",
    )
    generated_minimal_confidence: float = Field(
        default=0.1,
        description="Confidence for the minimal synthetic record",
    )

    # -------------------------------------------------------------------------
    # Semantic Cache
    # -------------------------------------------------------------------------
    semantic_cache_key: str = Field(
        default="semantic_exercise_cache",
        description="Key under which the semantic cache is persisted",
    )
    semantic_cache_max_entries: int = Field(
        default=1000,
        ge=1,
        description="LRU cap for semantic cache entries",
    )
    semantic_cache_ttl_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Optional expiry for semantic cache entries (unset = never)",
    )
    semantic_cache_path: str = Field(
        default="data/semantic_cache.json",
        description="JSON file used when no Supabase store is configured",
    )
    semantic_cache_table: str = Field(
        default="semantic_cache",
        description="Supabase table backing the key-value store",
    )

    # -------------------------------------------------------------------------
    # Supabase
    # -------------------------------------------------------------------------
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (full access)",
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anonymous key (limited access)",
    )

    @property
    def supabase_key(self) -> Optional[str]:
        """Get the best available Supabase key (service role preferred)."""
        return self.supabase_service_role_key or self.supabase_anon_key

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------
    catalog_path: str = Field(
        default="shared/dictionaries/exercise_catalog.yaml",
        description="YAML seed file for the in-memory exercise catalog",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @field_validator(
        "fuzzy_threshold",
        "semantic_threshold",
        "semantic_confidence_boost",
        "classification_confidence",
        "generated_confidence",
        "generated_degraded_confidence",
        "generated_minimal_confidence",
    )
    @classmethod
    def validate_unit_interval(cls, v: float) -> float:
        """Thresholds and confidences must lie in [0, 1]."""
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"Value must be between 0.0 and 1.0, got {v}")
        return v

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def supabase_configured(self) -> bool:
        """Check if a Supabase-backed store can be built."""
        return bool(self.supabase_url and self.supabase_key)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Engine settings instance
    """
    return Settings()
