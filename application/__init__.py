"""
Application layer for the exercise resolver.

This package contains:
- ports/: Protocol interfaces for the engine's collaborators (catalog,
  generative model, key-value store)
"""
