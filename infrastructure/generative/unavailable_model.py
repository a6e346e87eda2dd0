"""Generative model stand-in used when no provider is configured."""
from typing import Any, Dict

from application.ports.generative_model import GenerationResponse


class UnavailableGenerativeModel:
    """Always reports failure, so dependent tiers miss without network calls."""

    def __init__(self, reason: str = "Generative model unavailable"):
        self._reason = reason

    async def generate(self, prompt: str, schema: Dict[str, Any]) -> GenerationResponse:
        return GenerationResponse(success=False, error=self._reason)
