"""
Terminal policies for the generation engine.

A policy answers two questions for an operation kind:
- how many pipeline attempts to make, and how long to wait between them
- what to do once every attempt failed

Policy chain:
    1. SinglePassWithFallbackPolicy: one attempt, then placeholder content
       (module lists, flashcard sets, quiz sets)
    2. BoundedRetryPolicy: up to max_attempts with a fixed delay, then
       ExhaustedRetries (module content)
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import structlog

from lesson_generation.llm.fallback import Sleeper
from lesson_generation.models.enums import GenerationOutcome, OperationKind
from lesson_generation.models.input_models import GenerationRequest
from lesson_generation.retry.exceptions import ExhaustedRetries
from lesson_generation.retry.metadata import RetryMetadata
from lesson_generation.retry.placeholders import PlaceholderSynthesizer

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RetryPolicyConfig:
    """
    Attempt budget of a policy.

    Attributes:
        max_attempts: Pipeline attempts, each a full model cascade (>= 1)
        delay_seconds: Pause between attempts, never after the last one
    """

    max_attempts: int = 1
    delay_seconds: float = 0.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")


class RetryPolicy(Protocol):
    """
    Protocol for terminal policies.

    The engine calls wait_before_attempt() before every attempt after the
    first, and on_exhausted() once the attempt budget is spent.
    """

    name: str
    config: RetryPolicyConfig
    exhausted_outcome: GenerationOutcome

    async def wait_before_attempt(self, attempt: int) -> None:
        """Pause before the given (1-indexed) attempt."""
        ...

    def on_exhausted(
        self,
        request: GenerationRequest,
        last_error: Exception,
        metadata: RetryMetadata,
    ) -> Any:
        """
        Produce the terminal result, or raise the terminal error.

        Args:
            request: Request that failed
            last_error: Error of the final attempt
            metadata: Attempt history, outcome already set to exhausted_outcome
        """
        ...


class _FixedDelayMixin:
    config: RetryPolicyConfig
    name: str
    _sleep: Sleeper

    async def wait_before_attempt(self, attempt: int) -> None:
        if attempt <= 1 or self.config.delay_seconds <= 0:
            return
        logger.info(
            "Waiting before next attempt",
            policy=self.name,
            attempt=attempt,
            delay_seconds=self.config.delay_seconds,
        )
        await self._sleep(self.config.delay_seconds)


class SinglePassWithFallbackPolicy(_FixedDelayMixin):
    """
    One attempt, then placeholder content.

    Any pipeline failure (decode, validation, transport, exhausted candidates)
    is answered with the operation's placeholder without another network call.
    """

    name = "single_pass_with_fallback"
    exhausted_outcome = GenerationOutcome.PLACEHOLDER

    def __init__(
        self,
        synthesizer: Optional[PlaceholderSynthesizer] = None,
        config: Optional[RetryPolicyConfig] = None,
        sleep: Sleeper = asyncio.sleep,
    ):
        self.synthesizer = synthesizer or PlaceholderSynthesizer()
        self.config = config or RetryPolicyConfig(max_attempts=1, delay_seconds=0.0)
        self._sleep = sleep

    def on_exhausted(
        self,
        request: GenerationRequest,
        last_error: Exception,
        metadata: RetryMetadata,
    ) -> Any:
        logger.warning(
            "Generation failed, returning placeholder content",
            operation=request.operation_kind.value,
            topic=request.topic,
            error_type=type(last_error).__name__,
            error=getattr(last_error, "message", str(last_error)),
        )
        return self.synthesizer.synthesize(request)


class BoundedRetryPolicy(_FixedDelayMixin):
    """
    Up to max_attempts attempts with a fixed delay, then ExhaustedRetries.

    Each attempt re-runs the full pipeline: prompt, model cascade, decode,
    validate.
    """

    name = "bounded_retry"
    exhausted_outcome = GenerationOutcome.ERROR

    def __init__(
        self,
        config: Optional[RetryPolicyConfig] = None,
        sleep: Sleeper = asyncio.sleep,
    ):
        self.config = config or RetryPolicyConfig(max_attempts=3, delay_seconds=1.0)
        self._sleep = sleep

    def on_exhausted(
        self,
        request: GenerationRequest,
        last_error: Exception,
        metadata: RetryMetadata,
    ) -> Any:
        logger.error(
            "All attempts failed",
            operation=request.operation_kind.value,
            topic=request.topic,
            total_attempts=metadata.total_attempts,
            error_type=type(last_error).__name__,
        )
        raise ExhaustedRetries(
            request=request,
            retry_metadata=metadata,
            last_error=last_error,
        ) from last_error


def default_policies(
    retry_config: Optional[RetryPolicyConfig] = None,
    synthesizer: Optional[PlaceholderSynthesizer] = None,
    sleep: Sleeper = asyncio.sleep,
) -> dict[OperationKind, RetryPolicy]:
    """
    Policy per operation kind.

    Args:
        retry_config: Budget of the bounded policy (module content)
        synthesizer: Placeholder source for single-pass operations
        sleep: Awaitable sleeper shared by both policies
    """
    single_pass = SinglePassWithFallbackPolicy(synthesizer=synthesizer, sleep=sleep)
    bounded = BoundedRetryPolicy(config=retry_config, sleep=sleep)
    return {
        OperationKind.MODULE_LIST: single_pass,
        OperationKind.FLASHCARD_SET: single_pass,
        OperationKind.QUIZ_SET: single_pass,
        OperationKind.MODULE_CONTENT: bounded,
    }
