"""
Enumerations for Lesson Generation Layer data models.

All enums are closed sets - no values outside these sets are permitted.
"""

from enum import Enum


class OperationKind(str, Enum):
    """
    Kind of artifact a generation request produces.

    Selects the prompt template, the content schema and the terminal policy.
    """

    MODULE_LIST = "module_list"
    MODULE_CONTENT = "module_content"
    FLASHCARD_SET = "flashcard_set"
    QUIZ_SET = "quiz_set"
    CHAT = "chat"

    @property
    def expects_array(self) -> bool:
        """True when the model is asked for a JSON array rather than an object."""
        return self is not OperationKind.MODULE_CONTENT


class QuestionType(str, Enum):
    """Quiz question answering mode."""

    SINGLE = "single"
    MULTIPLE = "multiple"


class ModuleType(str, Enum):
    """Lesson flavour; technical lessons carry code examples."""

    TECHNICAL = "technical"
    GENERAL = "general"


class DecodeStage(str, Enum):
    """
    Recovery stage that produced a decoded payload.

    Diagnostics only; never part of a returned result.
    """

    DIRECT_PARSE = "direct_parse"
    BASE64 = "base64"
    FENCED = "fenced"
    NORMALIZED_WHITESPACE = "normalized_whitespace"


class GenerationOutcome(str, Enum):
    """Terminal state of one generation call."""

    SUCCESS = "success"
    PLACEHOLDER = "placeholder"
    ERROR = "error"
