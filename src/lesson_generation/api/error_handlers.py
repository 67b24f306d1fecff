"""
FastAPI exception handlers for structured error responses.

Maps domain exceptions to HTTP status codes. Every error body has the shape
{"error", "message", "details", "timestamp"}.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from lesson_generation.llm.exceptions import (
    CandidatesExhausted,
    LLMClientError,
    TransportFailure,
)
from lesson_generation.retry.exceptions import ExhaustedRetries
from lesson_generation.validation.exceptions import InvalidRequestError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, message: str, details: Any = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "details": jsonable_encoder(details or {}),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


async def invalid_request_handler(request: Request, exc: InvalidRequestError) -> JSONResponse:
    """
    Handle unusable caller input (blank topic, bad count).

    Maps to 400 Bad Request. No network call was made.
    """
    logger.warning(
        "Invalid generation request",
        extra={"path": request.url.path, "details": exc.details},
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, "invalid_request", exc.message, exc.details)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle malformed request bodies (missing fields, wrong types).

    Maps to 400 Bad Request (client error).
    """
    logger.warning(
        "Invalid request format",
        extra={"path": request.url.path, "errors": exc.errors()},
    )
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "invalid_request",
        "Request validation failed",
        {"errors": exc.errors()},
    )


async def exhausted_retries_handler(request: Request, exc: ExhaustedRetries) -> JSONResponse:
    """
    Handle module content generation that failed on every attempt.

    Maps to 503 Service Unavailable (temporary failure).
    """
    logger.error(
        "Generation attempts exhausted",
        extra={
            "operation": exc.request.operation_kind.value,
            "total_attempts": exc.retry_metadata.total_attempts,
            "total_latency_ms": exc.retry_metadata.total_latency_ms,
            "last_error": str(exc.last_error),
        },
    )
    return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "retries_exhausted", exc.message, exc.details)


async def candidates_exhausted_handler(request: Request, exc: CandidatesExhausted) -> JSONResponse:
    """
    Handle a cascade in which every candidate model was unavailable.

    Maps to 503 Service Unavailable.
    """
    logger.error("All candidate models unavailable", extra={"failures": exc.failures})
    return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "models_unavailable", exc.message, exc.details)


async def transport_failure_handler(request: Request, exc: TransportFailure) -> JSONResponse:
    """
    Handle a non-recoverable failure talking to the text-generation service.

    Maps to 504 Gateway Timeout when the call timed out, 502 Bad Gateway otherwise.
    """
    logger.error(
        "Text-generation service failure",
        extra={"model": exc.model, "error_type": type(exc.cause).__name__, "error": str(exc.cause)},
    )
    if exc.is_timeout:
        return _error_response(status.HTTP_504_GATEWAY_TIMEOUT, "llm_timeout", exc.message, exc.details)
    return _error_response(status.HTTP_502_BAD_GATEWAY, "llm_failure", exc.message, exc.details)


async def llm_client_error_handler(request: Request, exc: LLMClientError) -> JSONResponse:
    """
    Handle other client errors (e.g. model listing).

    Maps to 502 Bad Gateway (upstream service unavailable).
    """
    logger.error("LLM client error", extra={"error": str(exc)})
    return _error_response(status.HTTP_502_BAD_GATEWAY, "llm_failure", exc.message, exc.details)


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.

    Maps to 500 Internal Server Error.
    """
    logger.exception(
        "Unexpected error",
        extra={"error_type": type(exc).__name__},
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    InvalidRequestError: invalid_request_handler,
    RequestValidationError: request_validation_error_handler,
    ExhaustedRetries: exhausted_retries_handler,
    CandidatesExhausted: candidates_exhausted_handler,
    TransportFailure: transport_failure_handler,
    LLMClientError: llm_client_error_handler,
    Exception: generic_error_handler,
}
