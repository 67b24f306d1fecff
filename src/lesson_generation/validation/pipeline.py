"""
Validation Pipeline: decode + validate orchestrator.

Walks the decoder's recovery stages in order and returns the first payload
the content schema accepts:
- no stage decoded anything      -> DecodeFailure
- something decoded, none valid  -> ValidationFailure (the last one seen)

Both are caught by the retry engine, which applies the operation's policy.
"""

from dataclasses import dataclass
from typing import Any

import structlog

from lesson_generation.models.input_models import GenerationRequest
from lesson_generation.models.llm_models import DecodedPayload, LLMGenerationResponse
from lesson_generation.monitoring.metrics import decode_stage_total
from .content_validator import ContentValidator
from .decoder import PayloadDecoder
from .exceptions import DecodeFailure, ValidationFailure

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ValidatedContent:
    """Normalized value plus the decoded payload it came from (diagnostics only)."""
    value: Any
    payload: DecodedPayload


class ValidationPipeline:
    """Turn a raw model response into a validated, normalized result."""

    def __init__(
        self,
        decoder: PayloadDecoder | None = None,
        validator: ContentValidator | None = None,
    ):
        self.decoder = decoder or PayloadDecoder()
        self.validator = validator or ContentValidator()

    def validate(self, llm_response: LLMGenerationResponse, request: GenerationRequest) -> ValidatedContent:
        """
        Decode and validate one response.

        Args:
            llm_response: Raw response from the fallback invoker
            request: Request the response answers

        Returns:
            ValidatedContent with the normalized value

        Raises:
            DecodeFailure: no recovery stage produced a structured value
            ValidationFailure: decoded value(s) did not fit the schema
        """
        last_failure: ValidationFailure | None = None
        stages_seen: list[str] = []

        for payload in self.decoder.iter_payloads(llm_response.text):
            stages_seen.append(payload.stage.value)
            try:
                value = self.validator.validate(payload.value, request)
            except ValidationFailure as e:
                logger.info(
                    "Decoded payload rejected by content schema",
                    operation=request.operation_kind.value,
                    stage=payload.stage.value,
                    error=e.message,
                )
                last_failure = e
                continue

            decode_stage_total.labels(stage=payload.stage.value).inc()
            logger.info(
                "Response validated",
                operation=request.operation_kind.value,
                stage=payload.stage.value,
                model=llm_response.model_used,
            )
            return ValidatedContent(value=value, payload=payload)

        if last_failure is not None:
            last_failure.details.setdefault("stages_tried", stages_seen)
            raise last_failure

        logger.warning(
            "Response could not be decoded",
            operation=request.operation_kind.value,
            model=llm_response.model_used,
            response_length=len(llm_response.text),
        )
        raise DecodeFailure(
            "No recovery stage produced a structured value",
            raw_content=llm_response.text,
        )
