"""
Unit tests for GeminiClient using httpx.MockTransport.

No network access: every request is answered by a handler function.
"""

import json

import httpx
import pytest

from lesson_generation.llm.exceptions import (
    LLMConnectionError,
    LLMGenerationError,
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from lesson_generation.llm.gemini_client import GeminiClient
from lesson_generation.models.llm_models import LLMGenerationRequest


def make_client(handler) -> GeminiClient:
    return GeminiClient(
        api_key="secret-key",
        base_url="https://gemini.test",
        api_version="v1",
        transport=httpx.MockTransport(handler),
    )


def gemini_body(text: str, finish_reason: str = "STOP") -> dict:
    return {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": text}]}, "finishReason": finish_reason}
        ],
        "usageMetadata": {"promptTokenCount": 12, "candidatesTokenCount": 34},
        "modelVersion": "gemini-2.5-flash-001",
    }


REQUEST = LLMGenerationRequest(prompt="Explain recursion", model="gemini-2.5-flash", temperature=0.5, max_tokens=256)


class TestGenerate:
    """Tests for GeminiClient.generate()."""

    @pytest.mark.asyncio
    async def test_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["key"] = request.headers.get("x-goog-api-key")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=gemini_body("Recursion is..."))

        async with make_client(handler) as client:
            response = await client.generate(REQUEST)

        assert response.text == "Recursion is..."
        assert response.model_used == "gemini-2.5-flash"
        assert response.finish_reason == "STOP"
        assert response.prompt_tokens == 12
        assert response.completion_tokens == 34
        assert seen["path"] == "/v1/models/gemini-2.5-flash:generateContent"
        assert seen["key"] == "secret-key"
        assert seen["body"]["contents"][0]["parts"][0]["text"] == "Explain recursion"
        assert seen["body"]["generationConfig"] == {"temperature": 0.5, "maxOutputTokens": 256}

    @pytest.mark.asyncio
    async def test_joins_multiple_parts(self):
        def handler(request):
            body = gemini_body("")
            body["candidates"][0]["content"]["parts"] = [{"text": "abc"}, {"text": "def"}]
            return httpx.Response(200, json=body)

        response = await make_client(handler).generate(REQUEST)

        assert response.text == "abcdef"

    @pytest.mark.asyncio
    async def test_404_is_model_not_available(self):
        def handler(request):
            return httpx.Response(404, json={"error": {"code": 404, "message": "models/x is not found"}})

        with pytest.raises(LLMModelNotAvailableError) as exc_info:
            await make_client(handler).generate(REQUEST)

        assert "models/x is not found" in exc_info.value.message
        assert exc_info.value.details["status"] == 404

    @pytest.mark.asyncio
    async def test_429_is_rate_limit(self):
        def handler(request):
            return httpx.Response(429, json={"error": {"message": "Resource has been exhausted"}})

        with pytest.raises(LLMRateLimitError):
            await make_client(handler).generate(REQUEST)

    @pytest.mark.asyncio
    async def test_other_status_is_generation_error_with_provider_message(self):
        def handler(request):
            return httpx.Response(400, json={"error": {"message": "API key not valid"}})

        with pytest.raises(LLMGenerationError) as exc_info:
            await make_client(handler).generate(REQUEST)

        assert not isinstance(exc_info.value, LLMModelNotAvailableError)
        assert exc_info.value.message == "Gemini error 400: API key not valid"

    @pytest.mark.asyncio
    async def test_empty_candidates(self):
        def handler(request):
            return httpx.Response(200, json={"candidates": [], "promptFeedback": {"blockReason": "SAFETY"}})

        with pytest.raises(LLMGenerationError, match="Empty response"):
            await make_client(handler).generate(REQUEST)

    @pytest.mark.asyncio
    async def test_invalid_json_body(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>oops</html>")

        with pytest.raises(LLMGenerationError, match="Invalid JSON"):
            await make_client(handler).generate(REQUEST)

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(LLMTimeoutError):
            await make_client(handler).generate(REQUEST)

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(LLMConnectionError) as exc_info:
            await make_client(handler).generate(REQUEST)

        assert not isinstance(exc_info.value, LLMTimeoutError)


class TestModelsAndHealth:
    """Tests for list_models() and health_check()."""

    @pytest.mark.asyncio
    async def test_list_models_strips_prefix(self):
        def handler(request):
            assert request.url.path == "/v1/models"
            return httpx.Response(200, json={"models": [{"name": "models/gemini-2.5-flash"}, {"name": "models/gemini-2.0-flash"}]})

        models = await make_client(handler).list_models()

        assert models == ["gemini-2.5-flash", "gemini-2.0-flash"]

    @pytest.mark.asyncio
    async def test_health_check_false_on_error(self):
        def handler(request):
            return httpx.Response(403, json={"error": {"message": "forbidden"}})

        assert await make_client(handler).health_check() is False

    @pytest.mark.asyncio
    async def test_health_check_true(self):
        def handler(request):
            return httpx.Response(200, json={"models": []})

        assert await make_client(handler).health_check() is True


def test_repr_and_base_url():
    client = GeminiClient(api_key="k", base_url="https://gemini.test/", timeout=30)

    assert client.base_url == "https://gemini.test"
    assert "timeout=30s" in repr(client)
