"""
API-specific request and response models for FastAPI endpoints.

These models wrap the core content models (Flashcard, QuizSet,
ModuleContent) in the JSON shapes the web client expects.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from lesson_generation.models.input_models import ChatContext
from lesson_generation.models.output_models import Flashcard


class LearningPathRequest(BaseModel):
    """Request for a five-module learning path."""

    topic: str = Field(
        description="Subject of the learning path",
        examples=["Python basics"]
    )


class LearningPathResponse(BaseModel):
    """Five progressive module titles."""

    modules: list[str] = Field(
        description="Module titles, 'Module N: Title'"
    )


class ModuleContentRequest(BaseModel):
    """Request for the full lesson of one module."""

    module_name: str = Field(
        description="Module title as returned by /learning-path",
        examples=["Module 1: Introduction to Python"]
    )
    detailed: bool = Field(
        default=False,
        description="Advanced instead of basic lesson content"
    )


class FlashcardsRequest(BaseModel):
    """Request for a flashcard deck."""

    topic: str = Field(
        description="Subject of the flashcards"
    )
    count: Optional[int] = Field(
        default=None,
        description="Number of cards (default: DEFAULT_FLASHCARD_COUNT)"
    )


class FlashcardsResponse(BaseModel):
    """Flashcard deck, ordered by increasing difficulty."""

    flashcards: list[Flashcard]


class QuizRequest(BaseModel):
    """Request for a quiz."""

    topic: str = Field(
        description="Subject of the quiz"
    )
    count: Optional[int] = Field(
        default=None,
        description="Number of questions (default: DEFAULT_QUIZ_COUNT)"
    )


class ChatRequest(BaseModel):
    """A learner's message plus optional learning context."""

    message: str = Field(
        description="Question or message from the learner"
    )
    context: Optional[ChatContext] = Field(
        default=None,
        description="Topic, level and focus (defaults apply when omitted)"
    )


class ChatResponse(BaseModel):
    """Model answer, returned verbatim."""

    reply: str


class ModelsResponse(BaseModel):
    """Candidate models in the order the fallback cascade tries them."""

    candidates: list[str]
    available: Optional[list[str]] = Field(
        default=None,
        description="Models served to the configured key (only with ?available=true)"
    )


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(
        description="Overall health status",
        examples=["healthy", "unhealthy"]
    )
    version: str = Field(
        description="Application version"
    )
    services: dict[str, str] = Field(
        description="Status of individual services",
        examples=[{"gemini": "ok"}]
    )
    timestamp: datetime = Field(
        description="Health check timestamp (UTC)"
    )
