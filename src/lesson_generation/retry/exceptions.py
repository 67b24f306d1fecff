"""
Retry engine exceptions.

ExhaustedRetries is the terminal error of operations that retry instead of
degrading to placeholder content (module content). It is the only error of
the generation pipeline that reaches the caller apart from InvalidRequestError.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lesson_generation.models.input_models import GenerationRequest
    from lesson_generation.retry.metadata import RetryMetadata


class ExhaustedRetries(Exception):
    """
    Raised when every attempt of a bounded retry policy failed.

    The last attempt's error is attached as last_error and chained as
    __cause__ by the engine.

    Attributes:
        request: Request that failed
        retry_metadata: Attempt history (attempts, failures, latency)
        last_error: Error of the final attempt
    """

    def __init__(
        self,
        request: "GenerationRequest",
        retry_metadata: "RetryMetadata",
        last_error: Exception,
    ) -> None:
        self.request = request
        self.retry_metadata = retry_metadata
        self.last_error = last_error
        self.message = (
            f"Failed to generate {request.operation_kind.value} after "
            f"{retry_metadata.total_attempts} attempts: {getattr(last_error, 'message', str(last_error))}"
        )
        self.details = {
            "operation": request.operation_kind.value,
            "topic": request.topic,
            "total_attempts": retry_metadata.total_attempts,
            "last_error_type": type(last_error).__name__,
            "failures": retry_metadata.failures,
        }
        super().__init__(self.message)
