"""
Pydantic data models for the Lesson Generation Layer.

Includes:
- Enums (OperationKind, QuestionType, ModuleType, DecodeStage, GenerationOutcome)
- Input models (GenerationRequest, GenerationParameters, ChatContext)
- Output models (Flashcard, QuizQuestion, QuizSet, ModuleSection, ModuleContent)
- LLM models (LLMGenerationRequest, LLMGenerationResponse, DecodedPayload)
"""

from lesson_generation.models.enums import (
    DecodeStage,
    GenerationOutcome,
    ModuleType,
    OperationKind,
    QuestionType,
)
from lesson_generation.models.input_models import (
    ChatContext,
    GenerationParameters,
    GenerationRequest,
)
from lesson_generation.models.output_models import (
    CodeExample,
    Flashcard,
    ModuleContent,
    ModuleSection,
    QuizQuestion,
    QuizSet,
)
from lesson_generation.models.llm_models import (
    DecodedPayload,
    LLMGenerationRequest,
    LLMGenerationResponse,
)

__all__ = [
    # Enums
    "OperationKind",
    "QuestionType",
    "ModuleType",
    "DecodeStage",
    "GenerationOutcome",
    # Input models
    "GenerationRequest",
    "GenerationParameters",
    "ChatContext",
    # Output models
    "Flashcard",
    "QuizQuestion",
    "QuizSet",
    "CodeExample",
    "ModuleSection",
    "ModuleContent",
    # LLM models
    "LLMGenerationRequest",
    "LLMGenerationResponse",
    "DecodedPayload",
]
