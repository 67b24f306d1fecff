"""
FastAPI application entry point for the Lesson Generation Layer.
"""

from pathlib import Path

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from lesson_generation.api.dependencies import get_llm_client
from lesson_generation.api.error_handlers import EXCEPTION_HANDLERS
from lesson_generation.api.middleware import RequestTracingMiddleware
from lesson_generation.api.routes import router
from lesson_generation.config import settings
from lesson_generation.llm.prompt_builder import DEFAULT_TEMPLATES_DIR
from lesson_generation.logging_config import configure_logging

# Configure structured logging before any other imports
configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
logger = structlog.get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Learning paths, lessons, flashcards, quizzes and tutoring chat generated by Gemini",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Request tracing middleware (must be first for request_id in all logs)
app.add_middleware(RequestTracingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

app.include_router(router, tags=["generation"])


@app.on_event("startup")
async def startup():
    """Application startup - log configuration and check local resources."""
    logger.info(
        "Application startup",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        gemini_base_url=settings.GEMINI_BASE_URL,
        candidates=list(settings.model_candidates),
    )

    if not settings.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY is not set, every generation call will fail")

    templates_dir = Path(settings.PROMPT_TEMPLATES_DIR) if settings.PROMPT_TEMPLATES_DIR else DEFAULT_TEMPLATES_DIR
    if templates_dir.exists():
        logger.info("Prompt templates directory found", path=str(templates_dir))
    else:
        logger.error("Prompt templates directory not found", path=str(templates_dir))

    logger.info("Application startup complete")


@app.on_event("shutdown")
async def shutdown():
    """Application shutdown - close the pooled HTTP client."""
    logger.info("Application shutdown")
    await get_llm_client().close()
    logger.info("Application shutdown complete")


if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    """Root endpoint with API documentation links."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health",
        "models": "/models",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "lesson_generation.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Only for development
    )
