"""
OpenAI implementation of the GenerativeModel port.

Uses JSON mode with the target schema embedded in the system prompt. Transient
errors (rate limits, timeouts, 5xx) are retried with exponential backoff; every
failure is reported as an unsuccessful GenerationResponse.
"""
import json
import logging
from typing import Any, Dict

from application.ports.generative_model import GenerationResponse
from exercise_resolver.ai.client_factory import AIClientFactory
from exercise_resolver.ai.retry import DEFAULT_MAX_ATTEMPTS, create_async_retrying
from exercise_resolver.settings import Settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an exercise database expert. Respond only with a JSON object "
    "that conforms to this JSON schema:\n{schema}"
)


class OpenAIGenerativeModel:
    """Structured generation through the OpenAI chat completions API."""

    def __init__(
        self,
        client: Any,
        model: str = "gpt-4o-mini",
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        temperature: float = 0.2,
    ):
        """
        Initialize with an AsyncOpenAI client.

        Args:
            client: openai.AsyncOpenAI instance (injected)
            model: Chat model name
            max_attempts: Attempts per call for retryable errors
            temperature: Sampling temperature
        """
        self._client = client
        self._model = model
        self._max_attempts = max_attempts
        self._temperature = temperature

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIGenerativeModel":
        client = AIClientFactory.create_async_openai_client(settings)
        return cls(
            client,
            model=settings.generative_model,
            max_attempts=settings.generative_max_attempts,
        )

    async def generate(self, prompt: str, schema: Dict[str, Any]) -> GenerationResponse:
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT.format(schema=json.dumps(schema))},
            {"role": "user", "content": prompt},
        ]

        try:
            async for attempt in create_async_retrying(max_attempts=self._max_attempts):
                with attempt:
                    response = await self._client.chat.completions.create(
                        model=self._model,
                        messages=messages,
                        temperature=self._temperature,
                        response_format={"type": "json_object"},
                    )
        except Exception as e:
            logger.warning(f"OpenAI generation failed: {e}")
            return GenerationResponse(success=False, error=str(e))

        # Validate response format before parsing
        if not response.choices or not response.choices[0].message.content:
            logger.warning("OpenAI returned empty response")
            return GenerationResponse(success=False, error="Empty response")

        content = response.choices[0].message.content
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"OpenAI returned invalid JSON: {e}")
            return GenerationResponse(success=False, error=f"Invalid JSON: {e}")

        if not isinstance(data, dict):
            return GenerationResponse(
                success=False,
                error=f"Expected a JSON object, got {type(data).__name__}",
            )
        return GenerationResponse(success=True, data=data)
