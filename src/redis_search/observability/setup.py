"""Process-wide observability bootstrap driven by ``Settings``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from redis_search.observability.logging import configure_logging
from redis_search.observability.tracing import init_tracing


if TYPE_CHECKING:
    from opentelemetry.sdk.trace import TracerProvider

    from redis_search.config import Settings


def setup_observability(
    settings: Settings,
    *,
    service_name: str = "redis-search",
    logger_levels: dict[str, str] | None = None,
    resource_attributes: dict[str, str] | None = None,
) -> TracerProvider:
    """Configure logging from ``settings`` and install the tracer provider.

    Call once at process start, before the first ``create_search``.
    """
    configure_logging(
        level=settings.log_level,
        json_output=settings.log_json,
        logger_levels=logger_levels,
    )
    return init_tracing(service_name=service_name, resource_attributes=resource_attributes)
