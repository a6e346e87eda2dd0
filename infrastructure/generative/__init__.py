"""Generative model adapters."""
from infrastructure.generative.openai_model import OpenAIGenerativeModel
from infrastructure.generative.unavailable_model import UnavailableGenerativeModel

__all__ = [
    "OpenAIGenerativeModel",
    "UnavailableGenerativeModel",
]
