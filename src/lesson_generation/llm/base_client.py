"""
Abstract base client for the text-generation service.

Defines the boundary the fallback invoker calls: generate(prompt, model)
returns raw text or raises an LLMClientError subclass. Keeping it abstract
lets tests (and future providers) stand in for Gemini.
"""

from abc import ABC, abstractmethod

import structlog

from lesson_generation.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for text-generation clients.

    Responsibilities:
    - Send one generation request to the service for one model
    - Return the raw text plus call metadata
    - Map transport/provider errors onto the LLMClientError hierarchy

    Does NOT handle:
    - Model fallback (that's ModelFallbackInvoker's job)
    - Payload decoding/validation (that's ValidationPipeline's job)
    - Retries of any kind (that's GenerationEngine's job)
    """

    def __init__(self, base_url: str, timeout: int = 60, **kwargs):
        """
        Initialize base client.

        Args:
            base_url: Base URL of the generation service
            timeout: Request timeout in seconds
            **kwargs: Additional provider-specific config
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.extra_config = kwargs

        logger.info(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            base_url=self.base_url,
            timeout=timeout,
        )

    @abstractmethod
    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Run one generation call against request.model.

        Args:
            request: Prompt, model id and sampling parameters

        Returns:
            LLMGenerationResponse with the raw text and the model used

        Raises:
            LLMModelNotAvailableError: Model not found / not supported
            LLMRateLimitError: Quota exceeded
            LLMGenerationError: Other provider-side errors
            LLMTimeoutError: Request exceeded timeout
            LLMConnectionError: Network errors
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Lightweight reachability check.

        Must not raise; returns False on any error.
        """
        pass

    async def close(self):
        """Release connections. Default implementation holds none."""
        logger.debug("Closing LLM client", client_class=self.__class__.__name__)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"timeout={self.timeout}s)"
        )
