"""
Validated boundary around the generative model.

``request_structured`` never raises: every failure mode (unsuccessful response,
exception from the model, missing data, schema violation) becomes a
``ParseResult`` carrying an error message.
"""
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

if TYPE_CHECKING:
    from application.ports import GenerativeModel

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


@dataclass(frozen=True)
class ParseResult(Generic[SchemaT]):
    """Either a validated value or an error description."""
    value: Optional[SchemaT] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.value is not None

    @classmethod
    def success(cls, value: SchemaT) -> "ParseResult[SchemaT]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "ParseResult[SchemaT]":
        return cls(error=error)


def parse_payload(data: object, schema_cls: Type[SchemaT]) -> ParseResult[SchemaT]:
    """Validate raw JSON-like data against a schema model."""
    if not isinstance(data, dict):
        return ParseResult.failure(
            f"Expected a JSON object, got {type(data).__name__}"
        )
    try:
        return ParseResult.success(schema_cls.model_validate(data))
    except ValidationError as e:
        return ParseResult.failure(
            f"{schema_cls.__name__} validation failed: {e.error_count()} error(s)"
        )


async def request_structured(
    model: "GenerativeModel",
    prompt: str,
    schema_cls: Type[SchemaT],
) -> ParseResult[SchemaT]:
    """
    Ask the generative model for output matching ``schema_cls``.

    Args:
        model: Generative collaborator
        prompt: Prompt text
        schema_cls: Pydantic model the output must validate against

    Returns:
        ParseResult with the validated model or an error
    """
    try:
        response = await model.generate(prompt, schema_cls.model_json_schema(by_alias=True))
    except Exception as e:
        logger.warning(f"Generative call for {schema_cls.__name__} raised: {e}")
        return ParseResult.failure(f"Generative call failed: {e}")

    if not response.success:
        error = response.error or "unsuccessful response"
        logger.warning(f"Generative call for {schema_cls.__name__} failed: {error}")
        return ParseResult.failure(error)

    if response.data is None:
        logger.warning(f"Generative call for {schema_cls.__name__} returned no data")
        return ParseResult.failure("Response contained no data")

    result = parse_payload(response.data, schema_cls)
    if not result.ok:
        logger.warning(f"Malformed generative response: {result.error}")
    return result
