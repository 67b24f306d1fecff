"""
FastAPI API routes and endpoints.

- routes.py: POST /learning-path, /module-content, /flashcards, /quiz, /chat;
  GET /models, /health
- dependencies.py: Singleton settings, Gemini client and generation service
- models.py: API-specific request/response models
- error_handlers.py: Exception handlers for structured error responses
- middleware.py: Request id tracing
"""

from lesson_generation.api import dependencies, error_handlers, models
from lesson_generation.api.routes import router

__all__ = [
    "router",
    "dependencies",
    "error_handlers",
    "models",
]
