"""
Placeholder content for operations that degrade instead of failing.

Placeholders are deterministic and parameterized only by the request's topic
and count, so a user always gets a usable (if generic) learning path or deck.
"""

from typing import Union

import structlog

from lesson_generation.models.enums import OperationKind
from lesson_generation.models.input_models import DEFAULT_ITEM_COUNT, GenerationRequest
from lesson_generation.models.output_models import Flashcard, QuizSet


logger = structlog.get_logger(__name__)

MODULE_TITLE_TEMPLATES = (
    "Module 1: Introduction to {topic}",
    "Module 2: Core Concepts of {topic}",
    "Module 3: Intermediate {topic} Techniques",
    "Module 4: Advanced {topic} Applications",
    "Module 5: Real-world {topic} Projects",
)

PlaceholderContent = Union[list[str], list[Flashcard], QuizSet]


class PlaceholderSynthesizer:
    """Build fallback content for module lists, flashcard sets and quiz sets."""

    def synthesize(self, request: GenerationRequest) -> PlaceholderContent:
        """
        Build the placeholder for a request.

        Raises:
            ValueError: the operation kind has no placeholder (module content, chat)
        """
        kind = request.operation_kind
        if kind is OperationKind.MODULE_LIST:
            content: PlaceholderContent = self.module_list(request.topic)
        elif kind is OperationKind.FLASHCARD_SET:
            content = self.flashcards(request.topic, request.parameters.count or DEFAULT_ITEM_COUNT)
        elif kind is OperationKind.QUIZ_SET:
            content = self.quiz()
        else:
            raise ValueError(f"No placeholder content for {kind.value}")

        logger.info("Placeholder content synthesized", operation=kind.value, topic=request.topic)
        return content

    @staticmethod
    def module_list(topic: str) -> list[str]:
        return [template.format(topic=topic) for template in MODULE_TITLE_TEMPLATES]

    @staticmethod
    def flashcards(topic: str, count: int) -> list[Flashcard]:
        return [
            Flashcard(
                id=i,
                front_html=f"Basic to advanced {topic} question {i}?",
                back_html=f"Detailed answer explaining {topic} at difficulty level {i}.",
            )
            for i in range(1, count + 1)
        ]

    @staticmethod
    def quiz() -> QuizSet:
        return QuizSet(count="0", items=[])
