"""
Content validation: check a decoded value against its operation's schema.

Each operation kind maps to one closed content schema (see models.output_models).
Collections must match the requested count exactly; a shorter or longer list
is a ValidationFailure and takes the same recovery path as a decode failure.
"""

from typing import Any, Callable

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from lesson_generation.models.enums import OperationKind
from lesson_generation.models.input_models import GenerationRequest
from lesson_generation.models.output_models import (
    Flashcard,
    ModuleContent,
    QuizQuestion,
    QuizSet,
)
from lesson_generation.monitoring.metrics import validation_failures_total
from .exceptions import ValidationFailure

logger = structlog.get_logger(__name__)


_MODULE_TITLES = TypeAdapter(list[str])
_FLASHCARDS = TypeAdapter(list[Flashcard])
_QUESTIONS = TypeAdapter(list[QuizQuestion])


def _format_errors(error: PydanticValidationError) -> list[str]:
    return [
        f"{'.'.join(str(loc) for loc in err['loc']) or 'root'}: {err['msg']}"
        for err in error.errors()
    ]


class ContentValidator:
    """
    Validate and normalize decoded payloads.

    validate() returns the normalized value (pydantic models for structured
    kinds, a plain list for module titles) or raises ValidationFailure.
    """

    def __init__(self) -> None:
        self._validators: dict[OperationKind, Callable[[Any, GenerationRequest], Any]] = {
            OperationKind.MODULE_LIST: self._validate_module_list,
            OperationKind.FLASHCARD_SET: self._validate_flashcards,
            OperationKind.QUIZ_SET: self._validate_quiz,
            OperationKind.MODULE_CONTENT: self._validate_module_content,
        }

    def validate(self, value: Any, request: GenerationRequest) -> Any:
        """
        Check shape, types and exact cardinality for the request's operation.

        Raises:
            ValidationFailure: value does not fit the schema
        """
        validator = self._validators.get(request.operation_kind)
        if validator is None:
            raise ValidationFailure(
                f"No content schema for operation {request.operation_kind.value}",
                operation=request.operation_kind.value,
            )
        try:
            return validator(value, request)
        except PydanticValidationError as e:
            validation_failures_total.labels(
                operation=request.operation_kind.value, error_type="schema"
            ).inc()
            raise ValidationFailure(
                f"Content schema validation failed with {e.error_count()} error(s)",
                operation=request.operation_kind.value,
                validation_errors=_format_errors(e),
            ) from e

    def _check_count(self, items: list, request: GenerationRequest) -> None:
        expected = request.expected_count
        if len(items) != expected:
            validation_failures_total.labels(
                operation=request.operation_kind.value, error_type="cardinality"
            ).inc()
            raise ValidationFailure(
                f"Expected exactly {expected} items, got {len(items)}",
                operation=request.operation_kind.value,
                expected_count=expected,
                actual_count=len(items),
            )

    def _require_list(self, value: Any, request: GenerationRequest) -> list:
        if not isinstance(value, list):
            validation_failures_total.labels(
                operation=request.operation_kind.value, error_type="not_array"
            ).inc()
            raise ValidationFailure(
                f"Expected a JSON array, got {type(value).__name__}",
                operation=request.operation_kind.value,
            )
        self._check_count(value, request)
        return value

    def _validate_module_list(self, value: Any, request: GenerationRequest) -> list[str]:
        titles = _MODULE_TITLES.validate_python(self._require_list(value, request), strict=True)
        blank = [i for i, title in enumerate(titles) if not title.strip()]
        if blank:
            validation_failures_total.labels(
                operation=request.operation_kind.value, error_type="blank_title"
            ).inc()
            raise ValidationFailure(
                "Module titles must be non-empty",
                operation=request.operation_kind.value,
                validation_errors=[f"{i}: blank title" for i in blank],
            )
        return titles

    def _validate_flashcards(self, value: Any, request: GenerationRequest) -> list[Flashcard]:
        return _FLASHCARDS.validate_python(self._require_list(value, request))

    def _validate_quiz(self, value: Any, request: GenerationRequest) -> QuizSet:
        questions = _QUESTIONS.validate_python(self._require_list(value, request))
        return QuizSet(count=str(len(questions)), items=questions)

    def _validate_module_content(self, value: Any, request: GenerationRequest) -> ModuleContent:
        if not isinstance(value, dict):
            validation_failures_total.labels(
                operation=request.operation_kind.value, error_type="not_object"
            ).inc()
            raise ValidationFailure(
                f"Expected a JSON object, got {type(value).__name__}",
                operation=request.operation_kind.value,
            )
        return ModuleContent.model_validate(value)
