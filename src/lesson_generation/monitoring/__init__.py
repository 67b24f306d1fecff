"""Monitoring and metrics instrumentation for the Lesson Generation Layer.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from lesson_generation.monitoring.metrics import (
    decode_stage_total,
    generation_attempts_total,
    generation_requests_total,
    llm_latency_seconds,
    llm_tokens_total,
    model_fallbacks_total,
    validation_failures_total,
)

__all__ = [
    "generation_requests_total",
    "generation_attempts_total",
    "model_fallbacks_total",
    "decode_stage_total",
    "validation_failures_total",
    "llm_latency_seconds",
    "llm_tokens_total",
]
