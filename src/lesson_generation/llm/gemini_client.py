"""
Gemini client implementation for text generation.

Talks to the Generative Language REST API with an httpx AsyncClient:
- POST /{version}/models/{model}:generateContent
- GET  /{version}/models

One call per generate(); no internal retries. Fallback across models and
attempt-level retries live in the invoker and the retry engine so every
remote call is visible to them.
"""

import time
from typing import Any, Dict, Optional

import httpx
import structlog

from lesson_generation.llm.base_client import BaseLLMClient
from lesson_generation.llm.exceptions import (
    LLMConnectionError,
    LLMGenerationError,
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from lesson_generation.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from lesson_generation.monitoring.metrics import llm_latency_seconds, llm_tokens_total


logger = structlog.get_logger(__name__)


class GeminiClient(BaseLLMClient):
    """
    Gemini-specific client using httpx for async HTTP communication.

    Error mapping:
    - 404 -> LLMModelNotAvailableError (next candidate)
    - 429 -> LLMRateLimitError
    - other 4xx/5xx -> LLMGenerationError with the provider's message
    - timeouts -> LLMTimeoutError, network errors -> LLMConnectionError
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://generativelanguage.googleapis.com",
        api_version: str = "v1",
        timeout: int = 60,
        connection_limits: Optional[httpx.Limits] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs
    ):
        """
        Initialize Gemini client.

        Args:
            api_key: Generative Language API key (sent as x-goog-api-key)
            base_url: API host
            api_version: Path prefix, "v1" or "v1beta"
            timeout: Request timeout in seconds
            connection_limits: httpx connection pool limits (default: 10 max connections)
            transport: Custom httpx transport (tests use httpx.MockTransport)
            **kwargs: Additional config
        """
        super().__init__(base_url, timeout, **kwargs)
        self.api_version = api_version.strip("/")
        self._api_key = api_key
        self._transport = transport
        self._connection_limits = connection_limits or httpx.Limits(
            max_keepalive_connections=5,
            max_connections=10,
            keepalive_expiry=30.0
        )
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the pooled async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                headers={"x-goog-api-key": self._api_key},
                transport=self._transport,
            )
            logger.debug("Created new httpx AsyncClient")
        return self._client

    def _model_path(self, model: str) -> str:
        name = model if model.startswith("models/") else f"models/{model}"
        return f"/{self.api_version}/{name}:generateContent"

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Provider error text from {"error": {"message": ...}}, or the raw body."""
        try:
            payload = response.json()
        except ValueError:
            return response.text
        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return response.text

    @staticmethod
    def _extract_text(payload: Dict[str, Any]) -> tuple[str, Optional[str]]:
        candidates = payload.get("candidates") or []
        if not candidates:
            return "", None
        first = candidates[0]
        parts = (first.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        return text, first.get("finishReason")

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate content with one model.

        Payload:
        {
            "contents": [{"role": "user", "parts": [{"text": "..."}]}],
            "generationConfig": {"temperature": 0.7, "maxOutputTokens": 8192}
        }
        """
        start_time = time.time()
        payload = {
            "contents": [{"role": "user", "parts": [{"text": request.prompt}]}],
            "generationConfig": {
                "temperature": request.temperature,
                "maxOutputTokens": request.max_tokens,
            },
        }

        logger.info(
            "Sending generation request to Gemini",
            model=request.model,
            prompt_length=len(request.prompt),
        )

        try:
            client = await self._get_client()
            response = await client.post(self._model_path(request.model), json=payload)
        except httpx.TimeoutException as e:
            self._observe(request.model, start_time, success=False)
            raise LLMTimeoutError(
                f"Request timeout after {self.timeout}s",
                details={"model": request.model, "timeout": self.timeout}
            ) from e
        except httpx.TransportError as e:
            self._observe(request.model, start_time, success=False)
            raise LLMConnectionError(
                f"Network error: {e}",
                details={"model": request.model, "error_type": type(e).__name__}
            ) from e

        if response.status_code >= 400:
            self._observe(request.model, start_time, success=False)
            message = self._error_message(response)
            details = {"model": request.model, "status": response.status_code, "error": message}
            logger.warning(
                "Gemini HTTP error",
                model=request.model,
                status_code=response.status_code,
                error=message,
            )
            if response.status_code == 404:
                raise LLMModelNotAvailableError(f"Model not found: {request.model} ({message})", details=details)
            if response.status_code == 429:
                raise LLMRateLimitError(f"Rate limited: {message}", details=details)
            raise LLMGenerationError(f"Gemini error {response.status_code}: {message}", details=details)

        try:
            data = response.json()
        except ValueError as e:
            self._observe(request.model, start_time, success=False)
            raise LLMGenerationError(
                "Invalid JSON response from Gemini",
                details={"model": request.model, "parse_error": str(e)}
            ) from e

        text, finish_reason = self._extract_text(data)
        if not text:
            self._observe(request.model, start_time, success=False)
            raise LLMGenerationError(
                "Empty response from Gemini",
                details={
                    "model": request.model,
                    "finish_reason": finish_reason,
                    "prompt_feedback": data.get("promptFeedback"),
                }
            )

        latency_ms = self._observe(request.model, start_time, success=True)
        usage = data.get("usageMetadata") or {}
        prompt_tokens = usage.get("promptTokenCount")
        completion_tokens = usage.get("candidatesTokenCount")
        if prompt_tokens:
            llm_tokens_total.labels(model=request.model, token_type="prompt").inc(prompt_tokens)
        if completion_tokens:
            llm_tokens_total.labels(model=request.model, token_type="completion").inc(completion_tokens)

        logger.info(
            "Gemini generation successful",
            model=request.model,
            latency_ms=latency_ms,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            finish_reason=finish_reason,
        )

        return LLMGenerationResponse(
            text=text,
            model_used=request.model,
            finish_reason=finish_reason,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=latency_ms,
            raw_metadata={"model_version": data.get("modelVersion")},
        )

    @staticmethod
    def _observe(model: str, start_time: float, success: bool) -> int:
        latency_ms = int((time.time() - start_time) * 1000)
        llm_latency_seconds.labels(
            model=model, success="true" if success else "false"
        ).observe(latency_ms / 1000.0)
        return latency_ms

    async def list_models(self) -> list[str]:
        """
        List models served to this key via GET /{version}/models.

        Returns:
            Model ids without the "models/" prefix (e.g. ["gemini-2.5-flash"])
        """
        try:
            client = await self._get_client()
            response = await client.get(f"/{self.api_version}/models", timeout=10.0)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to list models", error=str(e))
            raise LLMConnectionError(
                f"Failed to list models: {e}",
                details={"error": str(e)}
            ) from e
        return [m["name"].removeprefix("models/") for m in data.get("models", []) if "name" in m]

    async def health_check(self) -> bool:
        """Return True if the model listing endpoint answers."""
        try:
            await self.list_models()
        except LLMConnectionError:
            return False
        logger.debug("Gemini health check passed")
        return True

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed Gemini client connection")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
