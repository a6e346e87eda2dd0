"""
Backoff policy for generative model calls.

Only transient failures (rate limits, 5xx, timeouts, dropped connections) are
retried. Everything else, including malformed output, fails on the first
attempt so the calling tier can fall through quickly.
"""
import asyncio
import logging
import re
from typing import Optional

import httpx
import openai
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)


logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 2
DEFAULT_MIN_WAIT_SECONDS = 0.5
DEFAULT_MAX_WAIT_SECONDS = 4.0

TRANSIENT_STATUS_CODES = frozenset({408, 409, 429, 500, 502, 503, 504})

_TRANSIENT_TYPES = (
    TimeoutError,
    asyncio.TimeoutError,
    ConnectionError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
    httpx.TimeoutException,
    httpx.NetworkError,
)
_PERMANENT_TYPES = (
    ValueError,
    openai.AuthenticationError,
    openai.PermissionDeniedError,
    openai.BadRequestError,
    openai.NotFoundError,
)

_STATUS_IN_MESSAGE = re.compile(r"\b([45]\d\d)\b")
_TRANSIENT_HINTS = ("rate limit", "timed out", "timeout", "connection", "temporarily unavailable")


def _status_code(exception: BaseException) -> Optional[int]:
    """HTTP status carried by the exception, or the first one in its message."""
    status = getattr(exception, "status_code", None)
    if isinstance(status, int):
        return status
    match = _STATUS_IN_MESSAGE.search(str(exception))
    return int(match.group(1)) if match else None


def is_retryable_error(exception: BaseException) -> bool:
    """
    True for errors worth another attempt.

    Typed SDK exceptions are checked first; anything else is classified by the
    HTTP status in the exception (or its message) and a few message hints.
    Quota exhaustion is reported as 429 by OpenAI but never clears on retry.
    """
    if isinstance(exception, _PERMANENT_TYPES):
        return False

    message = str(exception).lower()
    if "quota" in message:
        return False
    if isinstance(exception, _TRANSIENT_TYPES):
        return True

    status = _status_code(exception)
    if status is not None:
        return status in TRANSIENT_STATUS_CODES

    type_name = type(exception).__name__.lower()
    if "ratelimit" in type_name or "timeout" in type_name:
        return True
    return any(hint in message for hint in _TRANSIENT_HINTS)


def _validate_retry_params(
    max_attempts: int,
    min_wait_seconds: float,
    max_wait_seconds: float,
) -> None:
    """Raises ValueError for a policy that could never run or never wait."""
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
    if min_wait_seconds <= 0 or max_wait_seconds <= 0:
        raise ValueError(
            f"wait bounds must be positive, got {min_wait_seconds}..{max_wait_seconds}"
        )
    if min_wait_seconds > max_wait_seconds:
        raise ValueError(
            f"min_wait_seconds ({min_wait_seconds}) exceeds max_wait_seconds ({max_wait_seconds})"
        )


def create_async_retrying(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    min_wait_seconds: float = DEFAULT_MIN_WAIT_SECONDS,
    max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS,
) -> AsyncRetrying:
    """
    Build a tenacity controller for one generative call.

    Usage:
        async for attempt in create_async_retrying(max_attempts=2):
            with attempt:
                response = await client.chat.completions.create(...)

    The last error is re-raised once attempts run out.
    """
    _validate_retry_params(max_attempts, min_wait_seconds, max_wait_seconds)

    return AsyncRetrying(
        retry=retry_if_exception(is_retryable_error),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(
            multiplier=min_wait_seconds,
            min=min_wait_seconds,
            max=max_wait_seconds,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
