"""
Generation engine with per-operation terminal policies.

Two policies:

1. **Single pass with fallback**: one attempt, then deterministic placeholder
   content (module lists, flashcard sets, quiz sets)
2. **Bounded retry**: up to MAX_ATTEMPTS with RETRY_DELAY_SECONDS between
   attempts, then ExhaustedRetries (module content)

Main Components:
    - GenerationEngine: Outer attempt loop (prompt -> cascade -> decode -> validate)
    - RetryPolicy: Protocol for terminal policies
    - PlaceholderSynthesizer: Degraded content per operation
    - RetryMetadata: Immutable attempt history
    - ExhaustedRetries: Raised when a bounded policy runs out of attempts

Usage:
    >>> from lesson_generation.retry import GenerationEngine
    >>> engine = GenerationEngine(invoker, prompt_builder)
    >>> result = await engine.run(request)
"""

from lesson_generation.retry.engine import GenerationEngine, GenerationResult
from lesson_generation.retry.exceptions import ExhaustedRetries
from lesson_generation.retry.metadata import RetryMetadata
from lesson_generation.retry.placeholders import PlaceholderSynthesizer
from lesson_generation.retry.strategies import (
    BoundedRetryPolicy,
    RetryPolicy,
    RetryPolicyConfig,
    SinglePassWithFallbackPolicy,
    default_policies,
)

__all__ = [
    "GenerationEngine",
    "GenerationResult",
    "ExhaustedRetries",
    "RetryMetadata",
    "PlaceholderSynthesizer",
    "RetryPolicy",
    "RetryPolicyConfig",
    "SinglePassWithFallbackPolicy",
    "BoundedRetryPolicy",
    "default_policies",
]
