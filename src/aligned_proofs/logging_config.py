"""Structured logging with correlation IDs for proof workflow tracing.

Each workflow invocation runs inside a LogContext, so every record emitted
while resolving, topping up, submitting or polling carries the same
correlation id plus the identifier and job id in play.
"""
from __future__ import annotations

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
identifier_var: ContextVar[Optional[str]] = ContextVar("identifier", default=None)
job_id_var: ContextVar[Optional[str]] = ContextVar("job_id", default=None)

_CONTEXT_FIELDS = ("correlation_id", "identifier", "job_id")

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", *_CONTEXT_FIELDS}


class CorrelationIDFilter(logging.Filter):
    """Logging filter that adds correlation context to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()
        record.identifier = identifier_var.get()
        record.job_id = job_id_var.get()
        return True


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key in _CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """
    Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON structured logging (True) or simple format (False)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - "
            "[%(correlation_id)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIDFilter())
    root_logger.addHandler(handler)


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return f"cor_{uuid.uuid4().hex[:16]}"


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()


def set_identifier_context(identifier: str) -> None:
    """Set the billing identifier in logging context."""
    identifier_var.set(identifier)


def set_job_context(job_id: str) -> None:
    """Set the job id in logging context."""
    job_id_var.set(job_id)


class LogContext:
    """Context manager for temporary logging context."""

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        identifier: Optional[str] = None,
        job_id: Optional[str] = None,
    ):
        self.correlation_id = correlation_id or generate_correlation_id()
        self.identifier = identifier
        self.job_id = job_id
        self._tokens: list = []

    def __enter__(self) -> "LogContext":
        self._tokens = [
            (correlation_id_var, correlation_id_var.set(self.correlation_id)),
            (identifier_var, identifier_var.set(self.identifier)),
            (job_id_var, job_id_var.set(self.job_id)),
        ]
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens = []


__all__ = [
    "CorrelationIDFilter",
    "StructuredFormatter",
    "LogContext",
    "setup_logging",
    "generate_correlation_id",
    "get_correlation_id",
    "set_identifier_context",
    "set_job_context",
]
