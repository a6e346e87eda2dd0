"""
Pydantic schemas for generative model output.

Responses are validated against these models at the collaborator boundary;
tier logic only ever sees instances of them. The JSON schema of each model is
what gets sent to the generative model.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from exercise_resolver.core.models import MovementPattern

MAX_ALTERNATIVES = 3


def _string_list(value: Any) -> Any:
    """Drop blank entries; pass anything that is not a list through for validation."""
    if isinstance(value, list):
        return [v.strip() for v in value if isinstance(v, str) and v.strip()]
    return value


class SemanticAlternative(BaseModel):
    """A candidate standard exercise name suggested by the model."""
    name: str = Field(min_length=1)
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    reason: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Alternative name must not be blank")
        return v


class SemanticMapping(BaseModel):
    """Likely standard-exercise synonyms for a free-text exercise name."""
    model_config = ConfigDict(populate_by_name=True)

    alternatives: List[SemanticAlternative] = Field(min_length=1)
    primary_movement: MovementPattern = Field(
        default=MovementPattern.ISOLATION,
        alias="primaryMovement",
    )
    equipment: List[str] = Field(default_factory=list)

    @field_validator("alternatives", mode="before")
    @classmethod
    def accept_plain_names(cls, value: Any) -> Any:
        """Models answer with either ["name", ...] or [{"name": ...}, ...]."""
        if isinstance(value, list):
            return [{"name": v} if isinstance(v, str) else v for v in value]
        return value

    @field_validator("primary_movement", mode="before")
    @classmethod
    def lenient_movement(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            if value not in {m.value for m in MovementPattern}:
                return MovementPattern.ISOLATION
        return value

    @field_validator("equipment", mode="before")
    @classmethod
    def clean_equipment(cls, value: Any) -> Any:
        return _string_list(value)

    @property
    def names(self) -> List[str]:
        """Alternative names in model order, de-duplicated, capped at three."""
        seen: List[str] = []
        for alternative in self.alternatives:
            if alternative.name not in seen:
                seen.append(alternative.name)
        return seen[:MAX_ALTERNATIVES]


class GeneratedExercise(BaseModel):
    """Complete exercise content synthesized from scratch."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    description: str = ""
    instructions: List[str] = Field(min_length=1)
    equipment: List[str] = Field(default_factory=list)
    target_muscles: List[str] = Field(default_factory=list, alias="targetMuscles")
    safety_tips: List[str] = Field(default_factory=list, alias="safetyTips")
    alternatives: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def unwrap_details(cls, data: Any) -> Any:
        """Accept the nested {"exerciseDetails": {..., "muscleGroups": [...]}} shape."""
        if not isinstance(data, dict):
            return data
        details = data.get("exerciseDetails")
        if isinstance(details, dict):
            merged = {k: v for k, v in data.items() if k != "exerciseDetails"}
            merged.update(details)
            data = merged
        if "muscleGroups" in data and "targetMuscles" not in data and "target_muscles" not in data:
            data = {**data, "targetMuscles": data["muscleGroups"]}
        return data

    @field_validator(
        "instructions", "equipment", "target_muscles", "safety_tips", "alternatives",
        mode="before",
    )
    @classmethod
    def clean_lists(cls, value: Any) -> Any:
        return _string_list(value)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Exercise name must not be blank")
        return v
