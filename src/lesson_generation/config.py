"""
Configuration settings for the Lesson Generation Layer.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from typing import Iterable, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


BUILT_IN_MODELS: tuple[str, ...] = (
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-2.0-flash-001",
    "gemini-2.0-flash",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Lesson Generation Layer"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # === Gemini Configuration ===
    GEMINI_API_KEY: str = ""
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com"
    GEMINI_API_VERSION: str = "v1"
    GEMINI_MODEL: Optional[str] = None  # Preferred model, tried before the defaults
    DEFAULT_MODELS: list[str] = list(BUILT_IN_MODELS)
    GEMINI_TIMEOUT: int = 60  # seconds, httpx transport timeout

    # === LLM Generation Parameters ===
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 8192
    LLM_CALL_TIMEOUT_SECONDS: Optional[float] = None  # Per-candidate bound, None = transport timeout only

    # === Retry & Fallback ===
    MODEL_SWITCH_DELAY_SECONDS: float = 0.3
    MAX_ATTEMPTS: int = 3  # Module content only
    RETRY_DELAY_SECONDS: float = 1.0

    # === Request Defaults ===
    DEFAULT_FLASHCARD_COUNT: int = 5
    DEFAULT_QUIZ_COUNT: int = 5
    MAX_ITEM_COUNT: int = 50

    # === Prompts ===
    PROMPT_TEMPLATES_DIR: Optional[str] = None  # None = templates bundled with the package

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True

    @property
    def model_candidates(self) -> tuple[str, ...]:
        """Ordered candidate models: preferred override first, then defaults."""
        return build_model_candidates(self.GEMINI_MODEL, self.DEFAULT_MODELS)


def build_model_candidates(
    preferred: Optional[str],
    defaults: Iterable[str] = BUILT_IN_MODELS,
) -> tuple[str, ...]:
    """
    Build the read-only candidate list, most-preferred first.

    Blank entries are dropped and duplicates keep their first position,
    so a preferred model that is also a default is only tried once.
    """
    candidates: list[str] = []
    for model in (preferred, *defaults):
        if not model or not model.strip():
            continue
        model = model.strip()
        if model not in candidates:
            candidates.append(model)
    return tuple(candidates)


# Global settings instance
settings = Settings()
