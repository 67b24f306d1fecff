"""
Input data models for the Lesson Generation Layer.

A GenerationRequest is created per call, never persisted, and owned
exclusively by the call stack that issued it.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from lesson_generation.models.enums import OperationKind


DEFAULT_ITEM_COUNT = 5
MAX_ITEM_COUNT = 50


class GenerationParameters(BaseModel):
    """Operation-specific knobs: item counts and the lesson detail flag."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    count: Optional[int] = Field(
        default=None,
        ge=1,
        description="Requested number of flashcards or quiz questions"
    )
    detailed: bool = Field(default=False, description="Advanced instead of basic lesson content")


class GenerationRequest(BaseModel):
    """
    One generation call: what to produce, about which topic, with which parameters.

    Use GenerationRequest.create() at call sites: it turns any rejection
    into InvalidRequestError before a network call can happen.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    operation_kind: OperationKind
    topic: str = Field(..., description="Topic, module name or chat message")
    parameters: GenerationParameters = Field(default_factory=GenerationParameters)

    @field_validator("topic", mode="before")
    @classmethod
    def topic_must_be_text(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("topic must be a non-empty string")
        return value.strip()

    @model_validator(mode="after")
    def counted_operations_need_count(self) -> "GenerationRequest":
        if self.operation_kind in (OperationKind.FLASHCARD_SET, OperationKind.QUIZ_SET):
            if self.parameters.count is None:
                raise ValueError(f"{self.operation_kind.value} requires a count")
        return self

    @property
    def expected_count(self) -> Optional[int]:
        """Exact number of items the result must contain, if the schema is a collection."""
        if self.operation_kind is OperationKind.MODULE_LIST:
            return DEFAULT_ITEM_COUNT
        if self.operation_kind in (OperationKind.FLASHCARD_SET, OperationKind.QUIZ_SET):
            return self.parameters.count
        return None

    @classmethod
    def create(
        cls,
        operation_kind: OperationKind,
        topic: Any,
        count: Optional[int] = None,
        detailed: bool = False,
        max_count: int = MAX_ITEM_COUNT,
    ) -> "GenerationRequest":
        """
        Build a validated request.

        Raises:
            InvalidRequestError: topic missing/blank/not a string, or count out of range
        """
        from lesson_generation.validation.exceptions import InvalidRequestError

        valid_count = isinstance(count, int) and not isinstance(count, bool) and 1 <= count <= max_count
        if count is not None and not valid_count:
            raise InvalidRequestError(
                f"count must be an integer between 1 and {max_count}",
                field="count",
                invalid_value=count,
            )
        try:
            return cls(
                operation_kind=operation_kind,
                topic=topic,
                parameters=GenerationParameters(count=count, detailed=detailed),
            )
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(loc) for loc in first["loc"]) or "request"
            raise InvalidRequestError(
                f"Invalid {operation_kind.value} request: {first['msg']}",
                field=field,
                invalid_value=topic if field == "topic" else count,
            ) from e


class ChatContext(BaseModel):
    """Learner context attached to a chat message."""

    model_config = ConfigDict(populate_by_name=True)

    topic: str = Field(default="General", description="What the learner wants to discuss")
    level: str = Field(default="Intermediate", description="Beginner / Intermediate / Advanced")
    focus: str = Field(default="General understanding", description="Aspects to focus on")

    @field_validator("topic", "level", "focus", mode="before")
    @classmethod
    def blank_means_default(cls, value: Any, info) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].default
        return value
