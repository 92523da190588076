"""Observability module for OpenTelemetry-aligned tracing, metrics, and logging."""

from redis_search.observability.context import (
    get_trace_context,
    namespace_context,
    set_trace_context,
    trace_context,
)
from redis_search.observability.logging import JsonFormatter, configure_logging
from redis_search.observability.metrics import (
    BATCH_SIZE,
    OPERATION_COUNT,
    OPERATION_LATENCY,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)
from redis_search.observability.setup import setup_observability
from redis_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "BATCH_SIZE",
    "OPERATION_COUNT",
    "OPERATION_LATENCY",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "namespace_context",
    "set_trace_context",
    "setup_observability",
    "trace_context",
    "track_latency",
]
