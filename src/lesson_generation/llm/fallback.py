"""
Model fallback cascade.

Tries each candidate model in order until one answers. Whether a failure
means "try the next model" or "stop now" is decided by classify_error(),
kept separate so the keyword heuristic can be swapped for structured error
codes without touching the cascade loop.
"""

import asyncio
import re
from enum import Enum
from typing import Awaitable, Callable, Optional, Sequence

import structlog

from lesson_generation.llm.base_client import BaseLLMClient
from lesson_generation.llm.exceptions import (
    CandidatesExhausted,
    LLMModelNotAvailableError,
    LLMTimeoutError,
    TransportFailure,
)
from lesson_generation.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from lesson_generation.monitoring.metrics import model_fallbacks_total


logger = structlog.get_logger(__name__)

Sleeper = Callable[[float], Awaitable[None]]

_MODEL_MISSING = re.compile(r"not found|not supported|404", re.IGNORECASE)


class ErrorClass(str, Enum):
    """How the cascade reacts to a failed candidate."""

    MODEL_UNAVAILABLE = "model_unavailable"
    FATAL = "fatal"


def classify_error(error: BaseException) -> ErrorClass:
    """
    Decide whether a candidate failure is worth trying another model for.

    A structured LLMModelNotAvailableError wins; otherwise the error text is
    scanned for "not found" / "not supported" / "404".
    """
    if isinstance(error, LLMModelNotAvailableError):
        return ErrorClass.MODEL_UNAVAILABLE
    if _MODEL_MISSING.search(str(error)):
        return ErrorClass.MODEL_UNAVAILABLE
    return ErrorClass.FATAL


class ModelFallbackInvoker:
    """
    Sequential cascade over an ordered, read-only candidate list.

    Guarantees:
    - at most len(candidates) remote calls per invoke()
    - no call after the first success
    - a FATAL failure stops the cascade immediately
    """

    def __init__(
        self,
        client: BaseLLMClient,
        candidates: Sequence[str],
        temperature: float = 0.7,
        max_tokens: int = 8192,
        switch_delay_seconds: float = 0.3,
        call_timeout_seconds: Optional[float] = None,
        sleep: Sleeper = asyncio.sleep,
        classify: Callable[[BaseException], ErrorClass] = classify_error,
    ):
        """
        Args:
            client: Text-generation boundary
            candidates: Model ids, most preferred first
            temperature: Sampling temperature for every call
            max_tokens: Output token limit for every call
            switch_delay_seconds: Pause before moving to the next candidate
            call_timeout_seconds: Optional bound on each remote call
            sleep: Awaitable sleeper (injected in tests)
            classify: Error classifier
        """
        if not candidates:
            raise ValueError("At least one candidate model is required")
        self.client = client
        self.candidates: tuple[str, ...] = tuple(candidates)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.switch_delay_seconds = switch_delay_seconds
        self.call_timeout_seconds = call_timeout_seconds
        self._sleep = sleep
        self._classify = classify

    async def _call(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        if self.call_timeout_seconds is None:
            return await self.client.generate(request)
        try:
            return await asyncio.wait_for(self.client.generate(request), self.call_timeout_seconds)
        except asyncio.TimeoutError as e:
            raise LLMTimeoutError(
                f"Call exceeded {self.call_timeout_seconds}s",
                details={"model": request.model, "timeout": self.call_timeout_seconds},
            ) from e

    async def invoke(self, prompt: str) -> LLMGenerationResponse:
        """
        Run the cascade for one prompt.

        Raises:
            TransportFailure: a candidate failed with a non-"model missing" error
            CandidatesExhausted: every candidate was unavailable
        """
        failures: list[tuple[str, str]] = []

        for index, model in enumerate(self.candidates):
            request = LLMGenerationRequest(
                prompt=prompt,
                model=model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            logger.debug("Trying candidate model", model=model, position=index + 1)
            try:
                response = await self._call(request)
            except Exception as e:
                reason = getattr(e, "message", None) or str(e) or type(e).__name__
                if self._classify(e) is ErrorClass.FATAL:
                    model_fallbacks_total.labels(model=model, reason=ErrorClass.FATAL.value).inc()
                    logger.error(
                        "Candidate failed with non-recoverable error, stopping cascade",
                        model=model,
                        error_type=type(e).__name__,
                        error=reason,
                    )
                    raise TransportFailure(f"{model}: {reason}", model=model, cause=e) from e

                failures.append((model, reason))
                model_fallbacks_total.labels(model=model, reason=ErrorClass.MODEL_UNAVAILABLE.value).inc()
                logger.warning("Candidate model unavailable", model=model, error=reason)
                if index < len(self.candidates) - 1:
                    await self._sleep(self.switch_delay_seconds)
                continue

            if failures:
                logger.info("Fallback model answered", model=model, skipped=[m for m, _ in failures])
            return response

        logger.error("All candidate models failed", failures=failures)
        raise CandidatesExhausted(failures)
