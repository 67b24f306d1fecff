"""
Retry metadata tracking.

RetryMetadata captures what happened during one generation call: how many
attempts ran, which model answered, which decode stage recovered the payload
and why earlier attempts failed. It is logged and attached to results and
to ExhaustedRetries; it never appears in returned content.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from lesson_generation.models.enums import DecodeStage, GenerationOutcome


@dataclass(frozen=True)
class RetryMetadata:
    """
    Attempt history of one generation call.

    Attributes:
        operation: Operation kind value (e.g. "flashcard_set")
        policy: Name of the terminal policy applied
        total_attempts: Pipeline attempts made (each one a full model cascade)
        outcome: success, placeholder or error
        total_latency_ms: Time from first attempt to final result (ms)
        model_used: Model that produced the accepted response
        decode_stage: Recovery stage that produced the accepted payload
        failures: One dict per failed attempt (attempt, error_type, message, details)
    """

    operation: str
    policy: str
    total_attempts: int
    outcome: GenerationOutcome
    total_latency_ms: int
    model_used: Optional[str] = None
    decode_stage: Optional[DecodeStage] = None
    failures: list[dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate metadata invariants."""
        if self.total_attempts < 1:
            raise ValueError("total_attempts must be >= 1")

        if self.total_latency_ms < 0:
            raise ValueError("total_latency_ms must be >= 0")

        if self.outcome is GenerationOutcome.SUCCESS:
            if self.model_used is None or self.decode_stage is None:
                raise ValueError("successful runs must record model_used and decode_stage")
        elif not self.failures:
            raise ValueError(f"{self.outcome.value} runs must record at least one failure")

    def to_log_dict(self) -> dict[str, Any]:
        """Flat key/value view for structured logging."""
        return {
            "operation": self.operation,
            "policy": self.policy,
            "total_attempts": self.total_attempts,
            "outcome": self.outcome.value,
            "total_latency_ms": self.total_latency_ms,
            "model_used": self.model_used,
            "decode_stage": self.decode_stage.value if self.decode_stage else None,
            "failures_count": len(self.failures),
        }
