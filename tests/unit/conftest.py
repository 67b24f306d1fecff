"""Unit test fixtures (mocks and stubs).

Provides a scripted text-generation client and a recording sleeper so the
cascade and retry loops run without network access or real delays.
"""

from typing import Callable, Union
from unittest.mock import AsyncMock, MagicMock

import pytest

from lesson_generation.llm.base_client import BaseLLMClient
from lesson_generation.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


Outcome = Union[str, BaseException]


def _scripted_generate(outcomes: list[Outcome]) -> Callable:
    remaining = list(outcomes)

    async def generate(request: LLMGenerationRequest) -> LLMGenerationResponse:
        if not remaining:
            raise AssertionError(f"Unexpected remote call for model {request.model}")
        outcome = remaining.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return LLMGenerationResponse(text=outcome, model_used=request.model, latency_ms=5)

    return generate


@pytest.fixture
def scripted_client():
    """Factory for a mock client answering each generate() call from a script.

    Each outcome is either response text or an exception to raise. The
    generate AsyncMock records every LLMGenerationRequest it receives.

    Usage:
        client = scripted_client("text", LLMModelNotAvailableError("gone"))
        client.generate.await_count
    """
    def _create(*outcomes: Outcome) -> MagicMock:
        client = MagicMock(spec=BaseLLMClient)
        client.generate = AsyncMock(side_effect=_scripted_generate(list(outcomes)))
        client.health_check = AsyncMock(return_value=True)
        client.close = AsyncMock()
        return client
    return _create


@pytest.fixture
def mock_sleep() -> AsyncMock:
    """Awaitable sleeper that records requested delays instead of waiting."""
    return AsyncMock(return_value=None)


@pytest.fixture
def candidates() -> tuple[str, ...]:
    return ("model-a", "model-b", "model-c")
