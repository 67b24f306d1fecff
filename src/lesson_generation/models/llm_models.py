"""
LLM-specific data models for the request/response cycle.

These models are internal to the LLM layer and handle the raw communication
with the text-generation service. They are separate from the content models
(ModuleContent, Flashcard, ...) so the client implementation can change
without touching validation.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from lesson_generation.models.enums import DecodeStage


class LLMGenerationRequest(BaseModel):
    """
    Internal request model for one remote generation call.

    Built by the fallback invoker once per candidate model.
    """
    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., min_length=1, description="Complete prompt text")
    model: str = Field(..., min_length=1, description="Opaque model identifier (e.g. 'gemini-2.5-flash')")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(default=8192, ge=1, le=65536, description="Maximum output tokens")


class LLMGenerationResponse(BaseModel):
    """
    Raw, unparsed output of one remote call.

    Transient: discarded once the payload has been decoded.
    """
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Generated text exactly as returned")
    model_used: str = Field(..., description="Candidate model that produced the text")
    finish_reason: Optional[str] = Field(default=None, description="Provider finish reason, e.g. 'STOP'")
    prompt_tokens: Optional[int] = Field(default=None, description="Tokens in prompt")
    completion_tokens: Optional[int] = Field(default=None, description="Tokens in completion")
    latency_ms: int = Field(default=0, ge=0, description="Call latency in milliseconds")
    raw_metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific metadata (for debugging)"
    )


class DecodedPayload(BaseModel):
    """Structured value recovered from a response, tagged with its recovery stage."""
    model_config = ConfigDict(frozen=True)

    value: Any
    stage: DecodeStage
