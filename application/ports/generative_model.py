"""
Generative Model Interface (Port).

Defines the contract for a structured-output language model. Implementations
must report failures through ``GenerationResponse.success`` rather than raise,
though callers still guard against exceptions.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol


@dataclass(frozen=True)
class GenerationResponse:
    """Raw structured output from a generative model."""
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class GenerativeModel(Protocol):
    """Abstract interface for structured JSON generation."""

    async def generate(self, prompt: str, schema: Dict[str, Any]) -> GenerationResponse:
        """
        Generate a JSON object for the prompt.

        Args:
            prompt: Natural language instructions
            schema: JSON schema the output should conform to

        Returns:
            GenerationResponse; ``data`` is unvalidated
        """
        ...
