"""Observability module for OpenTelemetry-aligned tracing, metrics, and logging."""

from librarian_search.observability.context import (
    get_trace_context,
    reset_trace_context,
    set_trace_context,
    trace_context,
)
from librarian_search.observability.logging import JsonFormatter, configure_logging
from librarian_search.observability.metrics import (
    INDEX_DOC_COUNT,
    OPERATION_COUNT,
    SEARCH_LATENCY,
    SEARCH_RESULTS,
    get_metrics,
    get_metrics_content_type,
    init_metrics,
    track_latency,
)
from librarian_search.observability.setup import configure_observability
from librarian_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "INDEX_DOC_COUNT",
    "OPERATION_COUNT",
    "SEARCH_LATENCY",
    "SEARCH_RESULTS",
    "JsonFormatter",
    "configure_logging",
    "configure_observability",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "reset_trace_context",
    "set_trace_context",
    "trace_context",
    "track_latency",
]
