"""
Custom exceptions for the LLM client layer.

Two groups:
- Client errors raised by a single remote call (connection, timeout,
  rate limit, model not available, generation error)
- Cascade errors raised by the fallback invoker once it stops trying
  candidates (TransportFailure, CandidatesExhausted)

The fallback invoker classifies client errors to decide whether to move on
to the next candidate model or abort the cascade.
"""


class LLMClientError(Exception):
    """
    Base exception for all LLM client errors.

    All LLM-specific exceptions inherit from this to allow catching
    any LLM-related error with a single except clause.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LLMConnectionError(LLMClientError):
    """
    Raised when unable to reach the text-generation service.

    Includes network errors, DNS failures, refused connections.
    Aborts the cascade: another model on the same host will not help.
    """
    pass


class LLMTimeoutError(LLMConnectionError):
    """
    Raised when a remote call exceeds its timeout.

    Separate from generic connection errors so the API can answer 504.
    """
    pass


class LLMGenerationError(LLMClientError):
    """
    Raised when the service returns an error for a generation call.

    Examples: invalid argument, safety block, empty candidate list,
    server-side 5xx. The message carries the provider's own error text,
    which the fallback classifier inspects.
    """
    pass


class LLMRateLimitError(LLMGenerationError):
    """
    Raised when the service rate-limits the request (HTTP 429).

    Quota is per project, so switching models does not help.
    """
    pass


class LLMModelNotAvailableError(LLMGenerationError):
    """
    Raised when the requested model does not exist or is not served.

    Triggers an immediate switch to the next candidate model.
    """
    pass


class TransportFailure(LLMClientError):
    """
    A candidate failed with an error that is not "model missing".

    The cascade stops at the first such failure; the original client error
    is chained as __cause__.
    """

    def __init__(self, message: str, model: str, cause: BaseException):
        super().__init__(
            message,
            details={"model": model, "error_type": type(cause).__name__, "error": str(cause)},
        )
        self.model = model
        self.cause = cause

    @property
    def is_timeout(self) -> bool:
        return isinstance(self.cause, LLMTimeoutError)


class CandidatesExhausted(LLMClientError):
    """
    Every candidate model reported itself unavailable.

    Attributes:
        failures: (model, reason) pairs in the order tried
    """

    def __init__(self, failures: list[tuple[str, str]]):
        combined = " | ".join(f"{model}: {reason}" for model, reason in failures)
        super().__init__(
            f"All model attempts failed. Errors: {combined}",
            details={"failures": [{"model": m, "error": r} for m, r in failures]},
        )
        self.failures = failures
