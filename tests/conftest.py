"""Shared fixtures for the exercise resolver tests."""
import pytest

from exercise_resolver.core.engine import ExerciseResolutionEngine
from exercise_resolver.core.semantic_cache import SemanticCache
from exercise_resolver.settings import Settings
from tests.fakes import FakeExerciseCatalog, FakeGenerativeModel, FakeKeyValueStore


@pytest.fixture
def settings() -> Settings:
    """Default settings isolated from the environment and any .env file."""
    return Settings(environment="test", openai_api_key=None, _env_file=None)


@pytest.fixture
def catalog() -> FakeExerciseCatalog:
    return FakeExerciseCatalog()


@pytest.fixture
def generator() -> FakeGenerativeModel:
    return FakeGenerativeModel()


@pytest.fixture
def store() -> FakeKeyValueStore:
    return FakeKeyValueStore()


@pytest.fixture
def cache(store: FakeKeyValueStore) -> SemanticCache:
    return SemanticCache(store, storage_key="test_cache", max_entries=10)


@pytest.fixture
def engine(catalog, generator, cache, settings) -> ExerciseResolutionEngine:
    """Engine wired to fakes, with an empty semantic cache."""
    return ExerciseResolutionEngine(
        catalog=catalog,
        cache=cache,
        generator=generator,
        settings=settings,
    )
