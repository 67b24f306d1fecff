"""
Text-generation boundary, model fallback and prompt construction.

Components:
- BaseLLMClient: Abstract base class for text-generation clients
- GeminiClient: Generative Language REST client over httpx
- ModelFallbackInvoker: Ordered cascade over candidate models
- PromptBuilder: Renders operation prompts from Jinja2 templates
- topic_utils: Technical-topic and code-language detection
- exceptions: Client and cascade exceptions
"""

from lesson_generation.llm.base_client import BaseLLMClient
from lesson_generation.llm.gemini_client import GeminiClient
from lesson_generation.llm.fallback import ErrorClass, ModelFallbackInvoker, classify_error
from lesson_generation.llm.prompt_builder import PromptBuilder
from lesson_generation.llm.exceptions import (
    CandidatesExhausted,
    LLMClientError,
    LLMConnectionError,
    LLMGenerationError,
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMTimeoutError,
    TransportFailure,
)

__all__ = [
    "BaseLLMClient",
    "GeminiClient",
    "ModelFallbackInvoker",
    "ErrorClass",
    "classify_error",
    "PromptBuilder",
    "LLMClientError",
    "LLMConnectionError",
    "LLMGenerationError",
    "LLMRateLimitError",
    "LLMTimeoutError",
    "LLMModelNotAvailableError",
    "TransportFailure",
    "CandidatesExhausted",
]
