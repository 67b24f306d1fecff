"""
FastAPI dependency injection for the lesson generation layer.

Provides singleton instances of expensive resources (HTTP client, templates)
wired once from settings. Tests override get_llm_client / get_service through
app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends

from lesson_generation.config import Settings, settings
from lesson_generation.llm.base_client import BaseLLMClient
from lesson_generation.llm.gemini_client import GeminiClient
from lesson_generation.service import LessonGenerationService


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance
    """
    return settings


@lru_cache()
def get_llm_client() -> BaseLLMClient:
    """
    Get singleton Gemini client with connection pooling.

    The client keeps one pooled httpx.AsyncClient shared by all requests.

    Returns:
        GeminiClient instance
    """
    config = get_settings()
    return GeminiClient(
        api_key=config.GEMINI_API_KEY,
        base_url=config.GEMINI_BASE_URL,
        api_version=config.GEMINI_API_VERSION,
        timeout=config.GEMINI_TIMEOUT,
    )


@lru_cache()
def get_service() -> LessonGenerationService:
    """
    Get singleton generation service.

    Loads prompt templates once; the candidate list is computed from settings
    here and never changes afterwards.

    Returns:
        LessonGenerationService instance
    """
    return LessonGenerationService.from_settings(get_settings(), client=get_llm_client())


def get_model_candidates(config: Settings = Depends(get_settings)) -> tuple[str, ...]:
    """Ordered candidate models for the /models endpoint."""
    return config.model_candidates
