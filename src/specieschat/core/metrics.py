"""Prometheus metrics for the species chat service.

Business metrics that complement the auto-instrumented HTTP metrics
provided by ``prometheus-fastapi-instrumentator``.

All metrics use the ``specieschat_`` prefix.
"""

import logging

from fastapi import FastAPI
from prometheus_client import Counter, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Chat request metrics
# ---------------------------------------------------------------------------

CHAT_RESPONSES_TOTAL = Counter(
    "specieschat_chat_responses_total",
    "Total chat requests by terminal outcome",
    ["outcome"],  # refused | success | auth_error | quota_error | generic_error
)

CHAT_RESPONSE_DURATION_SECONDS = Histogram(
    "specieschat_chat_response_duration_seconds",
    "End-to-end duration of a chat request, retries included",
    buckets=(0.25, 0.5, 1, 2, 5, 10, 30, 60),
)

# ---------------------------------------------------------------------------
# Completion attempt metrics
# ---------------------------------------------------------------------------

LLM_ATTEMPTS_TOTAL = Counter(
    "specieschat_llm_attempts_total",
    "Total completion attempts by result",
    ["model_name", "result"],  # ok | rate_limited | empty_response | ...
)

LLM_BACKOFF_SECONDS_TOTAL = Counter(
    "specieschat_llm_backoff_seconds_total",
    "Total seconds spent sleeping between rate-limited attempts",
)

LLM_HISTORY_TURNS_DROPPED = Histogram(
    "specieschat_llm_history_turns_dropped",
    "History turns dropped by the character budget per request",
    buckets=(0, 1, 2, 5, 10, 20, 50),
)


def setup_metrics(app: FastAPI) -> None:
    """Attach HTTP instrumentation and the ``/metrics`` endpoint to *app*."""
    Instrumentator(
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/health", "/metrics"],
    ).instrument(app).expose(app, endpoint="/metrics")

    logger.info("Prometheus metrics initialised")
