"""Integration tests against the live Gemini API.

These tests require GEMINI_API_KEY and network access.
Run: GEMINI_API_KEY=... pytest -m integration

Tests are skipped if the key is unset or the API is not reachable.
"""

import pytest

from lesson_generation.config import BUILT_IN_MODELS
from lesson_generation.llm.exceptions import LLMModelNotAvailableError
from lesson_generation.models.llm_models import LLMGenerationRequest
from lesson_generation.service import LessonGenerationService


pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_gemini_health_check(real_gemini_client):
    assert await real_gemini_client.health_check() is True


@pytest.mark.asyncio
async def test_gemini_lists_models(real_gemini_client):
    models = await real_gemini_client.list_models()

    assert models
    assert all(not name.startswith("models/") for name in models)


@pytest.mark.asyncio
async def test_gemini_generate(real_gemini_client):
    request = LLMGenerationRequest(
        prompt="Reply with the single word: ready",
        model=BUILT_IN_MODELS[0],
        temperature=0.0,
        max_tokens=256,
    )

    response = await real_gemini_client.generate(request)

    assert response.text.strip()
    assert response.model_used == BUILT_IN_MODELS[0]


@pytest.mark.asyncio
async def test_gemini_unknown_model(real_gemini_client):
    request = LLMGenerationRequest(prompt="hello", model="gemini-does-not-exist")

    with pytest.raises(LLMModelNotAvailableError):
        await real_gemini_client.generate(request)


@pytest.mark.asyncio
async def test_service_learning_path(integration_settings):
    service = LessonGenerationService.from_settings(integration_settings)
    try:
        modules = await service.generate_learning_path("Python")
    finally:
        await service.close()

    assert len(modules) == 5
    for index, title in enumerate(modules, start=1):
        assert title.startswith(f"Module {index}:")


@pytest.mark.asyncio
async def test_service_flashcards(integration_settings):
    service = LessonGenerationService.from_settings(integration_settings)
    try:
        cards = await service.generate_flashcards("Photosynthesis", 3)
    finally:
        await service.close()

    assert [card.id for card in cards] == [1, 2, 3]
