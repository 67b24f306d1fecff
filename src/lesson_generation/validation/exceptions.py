"""
Validation-specific exceptions for the decode/validate half of the pipeline.

DecodeFailure and ValidationFailure are kept distinct even though the retry
engine recovers from both the same way (placeholder or next attempt):
- DecodeFailure: no recovery stage produced a structured value
- ValidationFailure: a value was produced but its shape or cardinality is wrong

InvalidRequestError is raised before any network call for malformed input.
"""

from typing import Any


class ValidationError(Exception):
    """
    Base exception for all validation errors.

    Carries a human-readable message plus structured details for logging.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize validation error.

        Args:
            message: Human-readable error description
            details: Structured error data for logging/metrics
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidRequestError(ValidationError):
    """
    The caller's request is unusable (missing/blank topic, bad count).

    Raised before prompt construction; never converted to a placeholder.
    """

    def __init__(self, message: str, field: str | None = None, invalid_value: Any | None = None):
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if invalid_value is not None:
            details["invalid_value"] = repr(invalid_value)[:100]
        super().__init__(message, details)


class DecodeFailure(ValidationError):
    """
    No recovery stage could extract a structured value from the response text.
    """

    def __init__(self, message: str, raw_content: str | None = None, stages_tried: list[str] | None = None):
        """
        Initialize decode failure.

        Args:
            message: Error description
            raw_content: Response text (first 500 chars kept for debugging)
            stages_tried: Recovery stages that were attempted
        """
        details: dict[str, Any] = {}
        if raw_content:
            details["content_snippet"] = raw_content[:500]
        if stages_tried:
            details["stages_tried"] = stages_tried
        super().__init__(message, details)


class ValidationFailure(ValidationError):
    """
    A structured value was decoded but does not fit the operation's schema.

    Includes the arity invariant: a collection whose length differs from the
    requested count is a ValidationFailure, not a short success.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        validation_errors: list[str] | None = None,
        expected_count: int | None = None,
        actual_count: int | None = None,
    ):
        details: dict[str, Any] = {}
        if operation:
            details["operation"] = operation
        if validation_errors:
            details["validation_errors"] = validation_errors[:10]
        if expected_count is not None:
            details["expected_count"] = expected_count
        if actual_count is not None:
            details["actual_count"] = actual_count
        super().__init__(message, details)
