"""Structured logging configuration for the customers service.

JSON output in cloud environments, human-readable console output locally.
Modules keep using ``logging.getLogger(__name__)``; stdlib records are
rendered through structlog's ``ProcessorFormatter`` so both paths share
one format.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

# Libraries that are chatty at INFO during container start-up and requests
_NOISY_LOGGERS = {
    "urllib3": logging.WARNING,
    "docker": logging.WARNING,
    "testcontainers": logging.INFO,
    "uvicorn.access": logging.WARNING,
}


def is_cloud_environment() -> bool:
    """Check if running in a cloud environment (GKE, Cloud Run, etc.)."""
    return bool(
        os.getenv("KUBERNETES_SERVICE_HOST")
        or os.getenv("K_SERVICE")  # Cloud Run
    )


def setup_logging(
    level: str = "INFO",
    force_json: bool = False,
    service_name: str | None = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        force_json: Force JSON output even in non-cloud environments
        service_name: Added to every event as ``service`` when given
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    use_json = force_json or is_cloud_environment()

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if service_name:
        structlog.contextvars.bind_contextvars(service=service_name)

    if use_json:
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta]
        + ([structlog.processors.format_exc_info] if use_json else [])
        + [renderer],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    for name, noisy_level in _NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(max(noisy_level, log_level))
