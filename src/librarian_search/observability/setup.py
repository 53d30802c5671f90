"""Startup wiring of logging, tracing and metrics from ``Settings``."""

from __future__ import annotations

import logging

from librarian_search.config import Settings
from librarian_search.observability.logging import configure_logging
from librarian_search.observability.metrics import init_metrics
from librarian_search.observability.tracing import init_tracing


logger = logging.getLogger(__name__)


def configure_observability(settings: Settings) -> None:
    """Apply the logging and telemetry settings; call once when the host starts."""
    configure_logging(settings.log_level, settings.log_json)
    init_tracing(settings.service_name)
    if settings.metrics_enabled:
        init_metrics(settings.service_name)
    logger.info(
        "Observability configured (service=%s, level=%s, json=%s, metrics=%s)",
        settings.service_name,
        settings.log_level,
        settings.log_json,
        settings.metrics_enabled,
    )
