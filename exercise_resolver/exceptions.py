"""Exception hierarchy for the exercise resolution engine."""


class ResolverError(Exception):
    """Base exception for the exercise resolver."""


class EngineInitializationError(ResolverError):
    """Raised when the engine cannot start, e.g. the durable store is unreachable."""


class CacheStoreError(ResolverError):
    """Raised by key-value store adapters when the backing store fails."""
