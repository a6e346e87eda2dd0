"""AI client factory for the generative collaborator."""
from __future__ import annotations

import logging
from typing import Any, Dict

import httpx

from exercise_resolver.settings import Settings, get_settings


logger = logging.getLogger(__name__)

# Default client timeout
DEFAULT_TIMEOUT = 30.0


def _create_async_httpx_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.AsyncClient:
    """
    Create the httpx client the OpenAI SDK sends requests through.

    Args:
        timeout: Request timeout in seconds

    Returns:
        Configured httpx.AsyncClient instance
    """
    return httpx.AsyncClient(
        timeout=timeout,
        limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
    )


class AIClientFactory:
    """Factory for creating AI clients."""

    @staticmethod
    def create_async_openai_client(
        settings: Settings | None = None,
        timeout: float | None = None,
    ) -> Any:
        """
        Create an AsyncOpenAI client.

        Args:
            settings: Settings override (defaults to get_settings())
            timeout: Client timeout in seconds (defaults to generative_timeout_seconds)

        Returns:
            openai.AsyncOpenAI client instance

        Raises:
            ValueError: If the API key is not configured
        """
        import openai

        settings = settings or get_settings()
        api_key = settings.openai_api_key
        if not api_key:
            raise ValueError("OpenAI API key not configured. Set OPENAI_API_KEY environment variable.")

        timeout = timeout if timeout is not None else settings.generative_timeout_seconds

        client_kwargs: Dict[str, Any] = {
            "api_key": api_key,
            "timeout": timeout,
            # Retries are handled by the caller so they can be classified and logged
            "max_retries": 0,
            "http_client": _create_async_httpx_client(timeout),
        }

        logger.debug("Creating AsyncOpenAI client")
        return openai.AsyncOpenAI(**client_kwargs)
