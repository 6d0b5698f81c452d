# Copyright 2025 msq
"""
Shared structlog setup.

- one processor chain: logger name, level, ISO timestamp, trace-id, exceptions
- JSON or console rendering
- per-level log counter exported to Prometheus

Call ``configure_logging`` once at startup; modules just use
``structlog.get_logger(__name__)``.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Any, TextIO

import structlog
from prometheus_client import Counter

trace_id_var: ContextVar[str | None] = ContextVar("trace_id", default=None)

log_count_metric = Counter(
    "saferoute_log_total",
    "Log events by level and module",
    ["level", "module"],
)


def add_trace_id(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Copy the current trace-id into the event, if one is set."""
    trace_id = trace_id_var.get()
    if trace_id:
        event_dict["trace_id"] = trace_id
    return event_dict


def add_prometheus_metrics(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    level = event_dict.get("level", "info")
    module = event_dict.get("logger", "unknown")
    log_count_metric.labels(level=level, module=module).inc()
    return event_dict


def configure_logging(
    *,
    json_logs: bool = False,
    log_level: str = "INFO",
    stream: TextIO = sys.stdout,
) -> None:
    """
    Configure structlog on top of the standard library logger.

    Args:
        json_logs: render JSON lines (production) instead of console output
        log_level: DEBUG/INFO/WARNING/ERROR
        stream: where the standard library handler writes
    """
    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    processors: list[Any] = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_trace_id,
        add_prometheus_metrics,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def set_trace_id(trace_id: str) -> None:
    trace_id_var.set(trace_id)


def clear_trace_id() -> None:
    trace_id_var.set(None)


def get_trace_id() -> str | None:
    return trace_id_var.get()
