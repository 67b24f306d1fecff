"""
Output data models for the Lesson Generation Layer.

These models are the closed set of content schemas a decoded payload is
validated into, one per operation kind. Field aliases keep the camelCase
names the model is prompted with (frontHTML, questionType, keyPoints, ...)
so results round-trip unchanged to the document store and the UI.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator, model_validator

from lesson_generation.models.enums import ModuleType, QuestionType


MIN_SECTION_CONTENT_LENGTH = 50


class Flashcard(BaseModel):
    """A single flashcard. Front is a short question, back a detailed answer."""

    model_config = ConfigDict(populate_by_name=True)

    id: StrictInt = Field(..., description="1-based position in the deck")
    front_html: str = Field(..., alias="frontHTML", min_length=1)
    back_html: str = Field(..., alias="backHTML", min_length=1)

    @field_validator("front_html", "back_html")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class QuizQuestion(BaseModel):
    """
    A quiz question with exactly four options.

    Single-choice questions carry one correct answer string, multiple-choice
    questions a non-empty list of correct answer strings.
    """

    model_config = ConfigDict(populate_by_name=True)

    question: str = Field(..., min_length=1)
    question_type: QuestionType = Field(..., alias="questionType")
    answers: list[str] = Field(..., min_length=4, max_length=4)
    correct_answer: Union[str, list[str]] = Field(..., alias="correctAnswer")
    explanation: str = Field(...)
    point: StrictInt = Field(..., ge=0)

    @model_validator(mode="after")
    def correct_answer_matches_type(self) -> "QuizQuestion":
        if self.question_type is QuestionType.SINGLE:
            if not isinstance(self.correct_answer, str) or not self.correct_answer.strip():
                raise ValueError("single-choice questions need one correct answer string")
        else:
            answers = self.correct_answer
            if not isinstance(answers, list) or not answers or not all(a.strip() for a in answers):
                raise ValueError("multiple-choice questions need a non-empty list of correct answers")
        return self


class QuizSet(BaseModel):
    """Quiz result: the question count as a string plus the questions themselves."""

    model_config = ConfigDict(populate_by_name=True)

    count: str = Field(..., description="Number of questions, as a string")
    items: list[QuizQuestion] = Field(default_factory=list)


class CodeExample(BaseModel):
    """Code snippet attached to a technical lesson section."""

    language: str = Field(default="javascript")
    code: str = Field(default="")
    explanation: str = Field(default="")


class ModuleSection(BaseModel):
    """One lesson section. Content must be substantive (more than 50 characters)."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=MIN_SECTION_CONTENT_LENGTH + 1)
    key_points: list[str] = Field(default_factory=list, alias="keyPoints")
    code_example: Optional[CodeExample] = Field(default=None, alias="codeExample")

    @field_validator("code_example", mode="before")
    @classmethod
    def clean_code_example(cls, value: Any) -> Optional[dict]:
        from lesson_generation.validation.sanitizers import clean_code_example

        return clean_code_example(value)

    @field_validator("content", mode="after")
    @classmethod
    def sanitize_content(cls, value: str) -> str:
        from lesson_generation.validation.sanitizers import sanitize_section_content

        return sanitize_section_content(value)


class ModuleContent(BaseModel):
    """Full lesson for one module."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    type: ModuleType
    sections: list[ModuleSection] = Field(..., min_length=1)
