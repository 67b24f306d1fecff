"""
Generation engine: the outer attempt loop.

One attempt = build prompt -> model cascade -> decode -> validate.
The operation's policy decides how many attempts run and what happens
once they are all spent (placeholder content or ExhaustedRetries).

Usage:
    engine = GenerationEngine(invoker, prompt_builder)
    result = await engine.run(request)
    result.value, result.metadata
"""

import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import structlog

from lesson_generation.llm.exceptions import CandidatesExhausted, TransportFailure
from lesson_generation.llm.fallback import ModelFallbackInvoker
from lesson_generation.llm.prompt_builder import PromptBuilder
from lesson_generation.models.enums import GenerationOutcome, OperationKind
from lesson_generation.models.input_models import GenerationRequest
from lesson_generation.monitoring.metrics import generation_attempts_total, generation_requests_total
from lesson_generation.retry.metadata import RetryMetadata
from lesson_generation.retry.strategies import RetryPolicy, default_policies
from lesson_generation.validation.exceptions import DecodeFailure, ValidationFailure
from lesson_generation.validation.pipeline import ValidatedContent, ValidationPipeline

logger = structlog.get_logger(__name__)

# Failures a policy may recover from. Anything else (including CancelledError) propagates.
RECOVERABLE_ERRORS = (DecodeFailure, ValidationFailure, TransportFailure, CandidatesExhausted)


@dataclass(frozen=True)
class GenerationResult:
    """Normalized content plus the attempt history that produced it."""

    value: Any
    metadata: RetryMetadata

    @property
    def is_placeholder(self) -> bool:
        return self.metadata.outcome is GenerationOutcome.PLACEHOLDER


class GenerationEngine:
    """
    Runs generation requests under their operation's policy.

    Attributes:
        invoker: Model fallback cascade (one remote call per candidate at most)
        prompt_builder: Renders the prompt for each attempt
        pipeline: Decode + validate
        policies: Terminal policy per operation kind
    """

    def __init__(
        self,
        invoker: ModelFallbackInvoker,
        prompt_builder: PromptBuilder,
        pipeline: Optional[ValidationPipeline] = None,
        policies: Optional[Mapping[OperationKind, RetryPolicy]] = None,
    ):
        self.invoker = invoker
        self.prompt_builder = prompt_builder
        self.pipeline = pipeline or ValidationPipeline()
        self.policies = dict(policies) if policies is not None else default_policies()

        logger.info(
            "GenerationEngine initialized",
            candidates=list(invoker.candidates),
            policies={kind.value: policy.name for kind, policy in self.policies.items()},
        )

    def policy_for(self, operation_kind: OperationKind) -> RetryPolicy:
        try:
            return self.policies[operation_kind]
        except KeyError:
            raise ValueError(f"No generation policy for {operation_kind.value}") from None

    async def _attempt(self, request: GenerationRequest) -> tuple[ValidatedContent, str]:
        prompt = self.prompt_builder.build_prompt(request)
        llm_response = await self.invoker.invoke(prompt)
        validated = self.pipeline.validate(llm_response, request)
        return validated, llm_response.model_used

    async def run(self, request: GenerationRequest) -> GenerationResult:
        """
        Execute a request with its operation's policy.

        Args:
            request: Validated generation request

        Returns:
            GenerationResult; for single-pass operations the value may be
            placeholder content (metadata.outcome == PLACEHOLDER)

        Raises:
            ExhaustedRetries: bounded policy spent every attempt
            ValueError: operation kind has no policy (chat)
        """
        policy = self.policy_for(request.operation_kind)
        operation = request.operation_kind.value
        start_time = time.monotonic()
        failures: list[dict[str, Any]] = []
        last_error: Optional[Exception] = None

        logger.info(
            "Starting generation",
            operation=operation,
            topic=request.topic,
            policy=policy.name,
            max_attempts=policy.config.max_attempts,
        )

        for attempt in range(1, policy.config.max_attempts + 1):
            await policy.wait_before_attempt(attempt)
            try:
                validated, model_used = await self._attempt(request)
            except RECOVERABLE_ERRORS as e:
                last_error = e
                failures.append({
                    "attempt": attempt,
                    "error_type": type(e).__name__,
                    "message": e.message,
                    "details": e.details,
                })
                generation_attempts_total.labels(operation=operation, success="false").inc()
                logger.warning(
                    "Generation attempt failed",
                    operation=operation,
                    attempt=attempt,
                    max_attempts=policy.config.max_attempts,
                    error_type=type(e).__name__,
                    error=e.message,
                )
                continue

            generation_attempts_total.labels(operation=operation, success="true").inc()
            metadata = RetryMetadata(
                operation=operation,
                policy=policy.name,
                total_attempts=attempt,
                outcome=GenerationOutcome.SUCCESS,
                total_latency_ms=self._elapsed_ms(start_time),
                model_used=model_used,
                decode_stage=validated.payload.stage,
                failures=failures,
            )
            generation_requests_total.labels(operation=operation, outcome=metadata.outcome.value).inc()
            logger.info("Generation succeeded", **metadata.to_log_dict())
            return GenerationResult(value=validated.value, metadata=metadata)

        metadata = RetryMetadata(
            operation=operation,
            policy=policy.name,
            total_attempts=policy.config.max_attempts,
            outcome=policy.exhausted_outcome,
            total_latency_ms=self._elapsed_ms(start_time),
            failures=failures,
        )
        generation_requests_total.labels(operation=operation, outcome=metadata.outcome.value).inc()
        logger.warning("Generation attempts exhausted", **metadata.to_log_dict())

        # last_error is set: the loop ran at least once and every attempt failed
        value = policy.on_exhausted(request, last_error, metadata)
        return GenerationResult(value=value, metadata=metadata)

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.monotonic() - start_time) * 1000)
