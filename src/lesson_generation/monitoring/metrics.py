"""Custom Prometheus metrics for the Lesson Generation Layer.

These metrics are exposed at the /metrics endpoint when PROMETHEUS_ENABLED.
Worth alerting on:
- generation_requests_total{outcome="placeholder"} (users seeing canned content)
- model_fallbacks_total (preferred model missing or unsupported)
- validation_failures_total (model drifting away from the requested shapes)
"""

from prometheus_client import Counter, Histogram

# === Generation Outcome Metrics ===

generation_requests_total = Counter(
    "generation_requests_total",
    "Generation calls by operation and terminal outcome",
    ["operation", "outcome"],
)
"""
Labels:
- operation: module_list, module_content, flashcard_set, quiz_set, chat
- outcome: success, placeholder, error
"""

generation_attempts_total = Counter(
    "generation_attempts_total",
    "Individual pipeline attempts (cascade + decode + validate)",
    ["operation", "success"],
)

# === Fallback Metrics ===

model_fallbacks_total = Counter(
    "model_fallbacks_total",
    "Candidate models skipped or aborted during the fallback cascade",
    ["model", "reason"],
)
"""
Labels:
- model: candidate model id
- reason: model_unavailable (moved on to next candidate), fatal (cascade aborted)
"""

# === Decode / Validation Metrics ===

decode_stage_total = Counter(
    "decode_stage_total",
    "Accepted payloads by the recovery stage that produced them",
    ["stage"],
)
"""
Labels:
- stage: base64, direct_parse, fenced, normalized_whitespace

A rising normalized_whitespace share means the model ignores the base64 directive.
"""

validation_failures_total = Counter(
    "validation_failures_total",
    "Content schema rejections by operation and error type",
    ["operation", "error_type"],
)

# === LLM Performance Metrics ===

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "Remote generation latency in seconds",
    ["model", "success"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)

llm_tokens_total = Counter(
    "llm_tokens_total",
    "Total tokens consumed by model and type",
    ["model", "token_type"],
)
"""
Labels:
- token_type: prompt, completion
"""
