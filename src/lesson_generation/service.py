"""
Public generation operations.

LessonGenerationService is the single entry point used by the HTTP API (and
usable directly from other async code):

- generate_learning_path(topic)              -> 5 module titles
- generate_module_content(module, detailed)  -> ModuleContent
- generate_flashcards(topic, count)          -> list[Flashcard]
- generate_quiz(topic, count)                -> QuizSet
- generate_chat_response(message, context)   -> plain text

Inputs are validated before any network call; invalid input raises
InvalidRequestError. List, flashcard and quiz operations never fail on
model trouble (they degrade to placeholder content); module content raises
ExhaustedRetries after its attempt budget; chat propagates cascade errors.
"""

import asyncio
from typing import Optional

import structlog

from lesson_generation.config import Settings
from lesson_generation.llm.base_client import BaseLLMClient
from lesson_generation.llm.exceptions import LLMClientError
from lesson_generation.llm.fallback import ModelFallbackInvoker, Sleeper
from lesson_generation.llm.gemini_client import GeminiClient
from lesson_generation.llm.prompt_builder import PromptBuilder
from lesson_generation.models.enums import GenerationOutcome, OperationKind
from lesson_generation.models.input_models import ChatContext, GenerationRequest
from lesson_generation.models.output_models import Flashcard, ModuleContent, QuizSet
from lesson_generation.monitoring.metrics import generation_requests_total
from lesson_generation.retry.engine import GenerationEngine, GenerationResult
from lesson_generation.retry.strategies import RetryPolicyConfig, default_policies
from lesson_generation.validation.exceptions import InvalidRequestError


logger = structlog.get_logger(__name__)


class LessonGenerationService:
    """
    Facade over the generation engine and the model cascade.

    Attributes:
        engine: Runs structured operations under their policies
        invoker: Model cascade (chat uses it directly)
        prompt_builder: Prompt renderer
    """

    def __init__(
        self,
        engine: GenerationEngine,
        default_flashcard_count: int = 5,
        default_quiz_count: int = 5,
        max_item_count: int = 50,
    ):
        self.engine = engine
        self.invoker = engine.invoker
        self.prompt_builder = engine.prompt_builder
        self.default_flashcard_count = default_flashcard_count
        self.default_quiz_count = default_quiz_count
        self.max_item_count = max_item_count

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: Optional[BaseLLMClient] = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> "LessonGenerationService":
        """
        Wire the full pipeline from settings.

        Args:
            settings: Application settings
            client: Text-generation client (default: GeminiClient from settings)
            sleep: Awaitable sleeper for model switches and retry delays
        """
        if client is None:
            client = GeminiClient(
                api_key=settings.GEMINI_API_KEY,
                base_url=settings.GEMINI_BASE_URL,
                api_version=settings.GEMINI_API_VERSION,
                timeout=settings.GEMINI_TIMEOUT,
            )
        invoker = ModelFallbackInvoker(
            client=client,
            candidates=settings.model_candidates,
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS,
            switch_delay_seconds=settings.MODEL_SWITCH_DELAY_SECONDS,
            call_timeout_seconds=settings.LLM_CALL_TIMEOUT_SECONDS,
            sleep=sleep,
        )
        engine = GenerationEngine(
            invoker=invoker,
            prompt_builder=PromptBuilder(templates_dir=settings.PROMPT_TEMPLATES_DIR),
            policies=default_policies(
                retry_config=RetryPolicyConfig(
                    max_attempts=settings.MAX_ATTEMPTS,
                    delay_seconds=settings.RETRY_DELAY_SECONDS,
                ),
                sleep=sleep,
            ),
        )
        return cls(
            engine=engine,
            default_flashcard_count=settings.DEFAULT_FLASHCARD_COUNT,
            default_quiz_count=settings.DEFAULT_QUIZ_COUNT,
            max_item_count=settings.MAX_ITEM_COUNT,
        )

    async def run(
        self,
        operation_kind: OperationKind,
        topic: str,
        count: Optional[int] = None,
        detailed: bool = False,
    ) -> GenerationResult:
        """
        Validate inputs and run one structured operation, keeping its metadata.

        Raises:
            InvalidRequestError: topic or count unusable (no network call made)
            ExhaustedRetries: module content attempts all failed
        """
        request = GenerationRequest.create(
            operation_kind,
            topic,
            count=count,
            detailed=detailed,
            max_count=self.max_item_count,
        )
        return await self.engine.run(request)

    async def generate_learning_path(self, topic: str) -> list[str]:
        """Five progressive module titles, or the placeholder path."""
        result = await self.run(OperationKind.MODULE_LIST, topic)
        return result.value

    async def generate_module_content(self, module_name: str, detailed: bool = False) -> ModuleContent:
        """Full lesson for one module. Raises ExhaustedRetries when every attempt fails."""
        result = await self.run(OperationKind.MODULE_CONTENT, module_name, detailed=detailed)
        return result.value

    async def generate_flashcards(self, topic: str, count: Optional[int] = None) -> list[Flashcard]:
        """Exactly count flashcards of increasing difficulty, or placeholder cards."""
        if count is None:
            count = self.default_flashcard_count
        result = await self.run(OperationKind.FLASHCARD_SET, topic, count=count)
        return result.value

    async def generate_quiz(self, topic: str, count: Optional[int] = None) -> QuizSet:
        """Exactly count questions, or the empty placeholder quiz."""
        if count is None:
            count = self.default_quiz_count
        result = await self.run(OperationKind.QUIZ_SET, topic, count=count)
        return result.value

    async def generate_chat_response(
        self,
        message: str,
        context: Optional[ChatContext] = None,
    ) -> str:
        """
        Answer a learner's message. The model's text is returned verbatim.

        Raises:
            InvalidRequestError: blank message
            TransportFailure: a candidate failed with a non-recoverable error
            CandidatesExhausted: every candidate model was unavailable
        """
        if not isinstance(message, str) or not message.strip():
            raise InvalidRequestError(
                "message must be a non-empty string",
                field="message",
                invalid_value=message,
            )

        operation = OperationKind.CHAT.value
        prompt = self.prompt_builder.build_chat_prompt(message, context)
        try:
            response = await self.invoker.invoke(prompt)
        except LLMClientError as e:
            generation_requests_total.labels(operation=operation, outcome=GenerationOutcome.ERROR.value).inc()
            logger.error("Chat generation failed", error_type=type(e).__name__, error=e.message)
            raise

        generation_requests_total.labels(operation=operation, outcome=GenerationOutcome.SUCCESS.value).inc()
        logger.info(
            "Chat response generated",
            model=response.model_used,
            response_length=len(response.text),
        )
        return response.text

    async def close(self) -> None:
        await self.invoker.client.close()
