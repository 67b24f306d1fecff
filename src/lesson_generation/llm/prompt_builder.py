"""
Prompt builder for generation requests.

Responsible for:
- Loading and rendering Jinja2 templates (one per operation kind)
- Classifying module topics as technical or general
- Appending the transport directive (answer as a raw base64 string)
- Rendering the plain-text chat prompt
"""

from pathlib import Path
from typing import Optional, Union

import structlog
from jinja2 import Environment, FileSystemLoader

from lesson_generation.llm.topic_utils import appropriate_language, is_code_related_topic
from lesson_generation.models.enums import ModuleType, OperationKind
from lesson_generation.models.input_models import ChatContext, GenerationRequest
from lesson_generation.models.output_models import MIN_SECTION_CONTENT_LENGTH


logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"
DEFAULT_QUIZ_POINTS = 10

TEMPLATE_NAMES = {
    OperationKind.MODULE_LIST: "module_list.txt",
    OperationKind.MODULE_CONTENT: "module_content.txt",
    OperationKind.FLASHCARD_SET: "flashcards.txt",
    OperationKind.QUIZ_SET: "quiz.txt",
}

# Start of base64("{\"title\"...") so the model sees what a valid answer looks like
_OBJECT_EXAMPLE = "eyJ0aXRsZSI6..."
_ARRAY_EXAMPLE = "WyJNb2R1bGUgMTo..."


class PromptBuilder:
    """
    Build prompt strings from GenerationRequest objects.

    Rendering is a pure function of the request; templates are loaded once.
    """

    def __init__(
        self,
        templates_dir: Optional[Union[str, Path]] = None,
        quiz_points: int = DEFAULT_QUIZ_POINTS,
    ):
        """
        Initialize prompt builder.

        Args:
            templates_dir: Directory containing prompt templates (default: bundled templates)
            quiz_points: Points suggested per quiz question
        """
        self.templates_dir = Path(templates_dir) if templates_dir else DEFAULT_TEMPLATES_DIR
        self.quiz_points = quiz_points

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False  # We're generating prompts, not HTML
        )

        try:
            self.templates = {
                kind: self.jinja_env.get_template(name) for kind, name in TEMPLATE_NAMES.items()
            }
            self.directive_template = self.jinja_env.get_template("transport_directive.txt")
            self.chat_template = self.jinja_env.get_template("chat.txt")
        except Exception as e:
            logger.error("Failed to load prompt templates", error=str(e), templates_dir=str(self.templates_dir))
            raise

        logger.info("Loaded prompt templates", templates_dir=str(self.templates_dir))

    def build_transport_directive(self, operation_kind: OperationKind) -> str:
        """Closing instruction: answer only with the base64 of the JSON array/object."""
        if operation_kind.expects_array:
            shape, example = "array", _ARRAY_EXAMPLE
        else:
            shape, example = "object", _OBJECT_EXAMPLE
        return self.directive_template.render(shape=shape, example=example).strip()

    def build_task_prompt(self, request: GenerationRequest) -> str:
        """
        Render the operation's task template.

        Raises:
            ValueError: operation kind has no task template (chat)
        """
        template = self.templates.get(request.operation_kind)
        if template is None:
            raise ValueError(f"No task template for {request.operation_kind.value}")

        variables = {
            "topic": request.topic,
            "count": request.expected_count,
            "detailed": request.parameters.detailed,
        }
        if request.operation_kind is OperationKind.QUIZ_SET:
            variables["points"] = self.quiz_points
        elif request.operation_kind is OperationKind.MODULE_CONTENT:
            technical = is_code_related_topic(request.topic)
            variables.update(
                technical=technical,
                module_type=(ModuleType.TECHNICAL if technical else ModuleType.GENERAL).value,
                language=appropriate_language(request.topic),
                min_content_length=MIN_SECTION_CONTENT_LENGTH,
            )

        return template.render(**variables).strip()

    def build_prompt(self, request: GenerationRequest) -> str:
        """
        Build the full prompt: task template plus transport directive.

        Args:
            request: Validated generation request (not chat)

        Returns:
            Prompt string sent to every candidate model
        """
        task = self.build_task_prompt(request)
        prompt = f"{task}\n\n{self.build_transport_directive(request.operation_kind)}"

        logger.debug(
            "Prompt built",
            operation=request.operation_kind.value,
            expected_count=request.expected_count,
            prompt_length=len(prompt),
        )
        return prompt

    def build_chat_prompt(self, message: str, context: Optional[ChatContext] = None) -> str:
        """Render the chat prompt. Chat answers are plain text, no directive."""
        return self.chat_template.render(
            message=message.strip(),
            context=context or ChatContext(),
        ).strip()
