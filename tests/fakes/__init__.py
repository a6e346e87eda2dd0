"""
Fake collaborator implementations for testing.

This package provides in-memory fakes of the application ports for fast,
isolated tests. No network, database or model access required.

Usage:
    from tests.fakes import FakeExerciseCatalog, FakeGenerativeModel, FakeKeyValueStore

    catalog = FakeExerciseCatalog()
    generator = FakeGenerativeModel({"SemanticMapping": {"alternatives": ["goblet squat"]}})
"""
from tests.fakes.exercise_catalog import FakeExerciseCatalog, make_record
from tests.fakes.generative_model import FakeGenerativeModel
from tests.fakes.key_value_store import FakeKeyValueStore

__all__ = [
    "FakeExerciseCatalog",
    "FakeGenerativeModel",
    "FakeKeyValueStore",
    "make_record",
]
