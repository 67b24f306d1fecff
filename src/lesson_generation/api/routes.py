"""
API routes for lesson generation.

Each POST endpoint maps onto one LessonGenerationService operation. Errors
are raised as domain exceptions and turned into JSON bodies by
api.error_handlers.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from prometheus_client import Histogram

from lesson_generation.api.dependencies import (
    get_llm_client,
    get_model_candidates,
    get_service,
    get_settings,
)
from lesson_generation.api.models import (
    ChatRequest,
    ChatResponse,
    FlashcardsRequest,
    FlashcardsResponse,
    HealthResponse,
    LearningPathRequest,
    LearningPathResponse,
    ModelsResponse,
    ModuleContentRequest,
    QuizRequest,
)
from lesson_generation.config import Settings
from lesson_generation.llm.base_client import BaseLLMClient
from lesson_generation.llm.gemini_client import GeminiClient
from lesson_generation.models.output_models import ModuleContent, QuizSet
from lesson_generation.service import LessonGenerationService

logger = logging.getLogger(__name__)

endpoint_duration_seconds = Histogram(
    "endpoint_duration_seconds",
    "Generation endpoint duration in seconds",
    ["endpoint"]
)

router = APIRouter()


@router.post(
    "/learning-path",
    response_model=LearningPathResponse,
    summary="Generate a five-module learning path",
    responses={
        200: {"description": "Module titles (generated or placeholder)"},
        400: {"description": "Invalid request (blank topic)"},
    },
)
async def learning_path(
    body: LearningPathRequest,
    service: LessonGenerationService = Depends(get_service),
) -> LearningPathResponse:
    """Never fails on model trouble: falls back to a placeholder path."""
    with endpoint_duration_seconds.labels(endpoint="learning_path").time():
        modules = await service.generate_learning_path(body.topic)
    return LearningPathResponse(modules=modules)


@router.post(
    "/module-content",
    response_model=ModuleContent,
    summary="Generate the lesson for one module",
    responses={
        200: {"description": "Lesson content"},
        400: {"description": "Invalid request (blank module name)"},
        503: {"description": "Every attempt failed"},
    },
)
async def module_content(
    body: ModuleContentRequest,
    service: LessonGenerationService = Depends(get_service),
) -> ModuleContent:
    with endpoint_duration_seconds.labels(endpoint="module_content").time():
        content = await service.generate_module_content(body.module_name, detailed=body.detailed)
    logger.info(
        "Module content generated",
        extra={"module_name": body.module_name, "sections": len(content.sections)},
    )
    return content


@router.post(
    "/flashcards",
    response_model=FlashcardsResponse,
    summary="Generate flashcards of increasing difficulty",
    responses={
        200: {"description": "Exactly count flashcards (generated or placeholder)"},
        400: {"description": "Invalid request (blank topic, count out of range)"},
    },
)
async def flashcards(
    body: FlashcardsRequest,
    service: LessonGenerationService = Depends(get_service),
) -> FlashcardsResponse:
    with endpoint_duration_seconds.labels(endpoint="flashcards").time():
        cards = await service.generate_flashcards(body.topic, count=body.count)
    return FlashcardsResponse(flashcards=cards)


@router.post(
    "/quiz",
    response_model=QuizSet,
    summary="Generate a quiz",
    responses={
        200: {"description": "Quiz (count '0' and no items when generation failed)"},
        400: {"description": "Invalid request (blank topic, count out of range)"},
    },
)
async def quiz(
    body: QuizRequest,
    service: LessonGenerationService = Depends(get_service),
) -> QuizSet:
    with endpoint_duration_seconds.labels(endpoint="quiz").time():
        return await service.generate_quiz(body.topic, count=body.count)


@router.post(
    "/chat",
    response_model=ChatResponse,
    summary="Answer a learner's question",
    responses={
        200: {"description": "Model answer"},
        400: {"description": "Blank message"},
        502: {"description": "Text-generation service failure"},
        503: {"description": "No candidate model available"},
        504: {"description": "Text-generation service timeout"},
    },
)
async def chat(
    body: ChatRequest,
    service: LessonGenerationService = Depends(get_service),
) -> ChatResponse:
    with endpoint_duration_seconds.labels(endpoint="chat").time():
        reply = await service.generate_chat_response(body.message, body.context)
    return ChatResponse(reply=reply)


@router.get(
    "/models",
    response_model=ModelsResponse,
    summary="Candidate models in fallback order",
)
async def models(
    available: bool = Query(default=False, description="Also list models served to the configured key"),
    candidates: tuple[str, ...] = Depends(get_model_candidates),
    client: BaseLLMClient = Depends(get_llm_client),
) -> ModelsResponse:
    served = None
    if available and isinstance(client, GeminiClient):
        served = await client.list_models()
    return ModelsResponse(candidates=list(candidates), available=served)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={
        200: {"description": "Text-generation service reachable"},
        503: {"description": "Text-generation service unreachable"},
    },
)
async def health_check(
    settings: Settings = Depends(get_settings),
    client: BaseLLMClient = Depends(get_llm_client),
):
    """Check that the text-generation service answers."""
    healthy = await client.health_check()
    services = {"gemini": "ok" if healthy else "unreachable"}

    logger.info(
        "Health check",
        extra={"status": "healthy" if healthy else "unhealthy", "services": services},
    )

    response = HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=settings.APP_VERSION,
        services=services,
        timestamp=datetime.now(timezone.utc),
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=response.model_dump(mode="json"),
    )
