"""
Unit tests for GenerationEngine.

Tests the attempt loop, policy dispatch and metadata tracking with a
scripted client (no network) and a recording sleeper (no real delays).
"""

import asyncio
import json

import pytest

from lesson_generation.llm.exceptions import LLMModelNotAvailableError, LLMRateLimitError
from lesson_generation.llm.fallback import ModelFallbackInvoker
from lesson_generation.llm.prompt_builder import PromptBuilder
from lesson_generation.models.enums import DecodeStage, GenerationOutcome, OperationKind
from lesson_generation.models.input_models import GenerationRequest
from lesson_generation.retry.engine import GenerationEngine
from lesson_generation.retry.exceptions import ExhaustedRetries
from lesson_generation.retry.strategies import RetryPolicyConfig, default_policies
from lesson_generation.validation.exceptions import DecodeFailure, ValidationFailure


@pytest.fixture
def make_engine(candidates, mock_sleep):
    """Factory building an engine around a scripted client."""
    def _create(client, max_attempts=3, delay_seconds=1.0):
        invoker = ModelFallbackInvoker(client, candidates, switch_delay_seconds=0.3, sleep=mock_sleep)
        policies = default_policies(
            RetryPolicyConfig(max_attempts=max_attempts, delay_seconds=delay_seconds),
            sleep=mock_sleep,
        )
        return GenerationEngine(invoker, PromptBuilder(), policies=policies)
    return _create


def module_list_request():
    return GenerationRequest.create(OperationKind.MODULE_LIST, "Python")


def content_request():
    return GenerationRequest.create(OperationKind.MODULE_CONTENT, "Module 1: Introduction to Python")


class TestSinglePass:
    """Operations with placeholder fallback."""

    @pytest.mark.asyncio
    async def test_success_records_metadata(self, make_engine, scripted_client, payloads, sample_module_titles):
        client = scripted_client(payloads.encode(sample_module_titles))
        engine = make_engine(client)

        result = await engine.run(module_list_request())

        assert result.value == sample_module_titles
        assert not result.is_placeholder
        assert result.metadata.outcome is GenerationOutcome.SUCCESS
        assert result.metadata.model_used == "model-a"
        assert result.metadata.decode_stage is DecodeStage.BASE64
        assert result.metadata.total_attempts == 1
        assert result.metadata.failures == []

    @pytest.mark.asyncio
    async def test_decode_failure_returns_placeholder_without_retry(self, make_engine, scripted_client):
        client = scripted_client("I'm sorry, I can't help with that.")
        engine = make_engine(client)

        result = await engine.run(module_list_request())

        assert result.is_placeholder
        assert result.value[0] == "Module 1: Introduction to Python"
        assert client.generate.await_count == 1
        assert result.metadata.failures[0]["error_type"] == DecodeFailure.__name__

    @pytest.mark.asyncio
    async def test_transport_failure_returns_placeholder(self, make_engine, scripted_client):
        client = scripted_client(LLMRateLimitError("Rate limited: quota"))
        engine = make_engine(client)

        result = await engine.run(GenerationRequest.create(OperationKind.QUIZ_SET, "Python", count=3))

        assert result.is_placeholder
        assert result.value.count == "0"
        assert client.generate.await_count == 1

    @pytest.mark.asyncio
    async def test_prompt_sent_to_model(self, make_engine, scripted_client, payloads, sample_module_titles):
        client = scripted_client(payloads.encode(sample_module_titles))

        await make_engine(client).run(module_list_request())

        prompt = client.generate.await_args.args[0].prompt
        assert '"Python"' in prompt
        assert "base64" in prompt


class TestBoundedRetry:
    """Module content: retries then ExhaustedRetries."""

    @pytest.mark.asyncio
    async def test_second_attempt_succeeds(self, make_engine, scripted_client, payloads, mock_sleep):
        client = scripted_client("not json", payloads.encode(payloads.module_content()))
        engine = make_engine(client)

        result = await engine.run(content_request())

        assert result.metadata.outcome is GenerationOutcome.SUCCESS
        assert result.metadata.total_attempts == 2
        assert len(result.metadata.failures) == 1
        assert client.generate.await_count == 2
        mock_sleep.assert_awaited_once_with(1.0)

    @pytest.mark.asyncio
    async def test_exhausted_after_max_attempts(self, make_engine, scripted_client, payloads, mock_sleep):
        short = payloads.module_content()
        short["sections"][0]["content"] = "Too short."
        client = scripted_client(*[json.dumps(short)] * 3)
        engine = make_engine(client)

        with pytest.raises(ExhaustedRetries) as exc_info:
            await engine.run(content_request())

        error = exc_info.value
        assert isinstance(error.last_error, ValidationFailure)
        assert error.__cause__ is error.last_error
        assert error.retry_metadata.total_attempts == 3
        assert error.retry_metadata.outcome is GenerationOutcome.ERROR
        assert client.generate.await_count == 3
        # Delay between attempts, none after the last
        assert [call.args[0] for call in mock_sleep.await_args_list] == [1.0, 1.0]

    @pytest.mark.asyncio
    async def test_each_attempt_reruns_cascade(self, make_engine, scripted_client, payloads, candidates):
        missing = [LLMModelNotAvailableError(f"Model not found: {m}") for m in candidates]
        client = scripted_client(*missing, payloads.encode(payloads.module_content()))
        engine = make_engine(client)

        result = await engine.run(content_request())

        assert result.metadata.total_attempts == 2
        assert result.metadata.model_used == "model-a"
        assert result.metadata.failures[0]["error_type"] == "CandidatesExhausted"
        assert client.generate.await_count == len(candidates) + 1


class TestEngineEdges:
    """Policy lookup and cancellation."""

    @pytest.mark.asyncio
    async def test_chat_has_no_policy(self, make_engine, scripted_client):
        engine = make_engine(scripted_client())
        request = GenerationRequest.create(OperationKind.CHAT, "hello")

        with pytest.raises(ValueError):
            await engine.run(request)

    @pytest.mark.asyncio
    async def test_cancellation_is_not_a_placeholder(self, make_engine, scripted_client):
        client = scripted_client(asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            await make_engine(client).run(module_list_request())
