"""Tests for correlation-aware logging."""
from __future__ import annotations

import json
import logging

import pytest

from aligned_proofs.logging_config import (
    CorrelationIDFilter,
    LogContext,
    StructuredFormatter,
    get_correlation_id,
    set_job_context,
    setup_logging,
)


def _record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("aligned_proofs.test", logging.INFO, __file__, 10, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogContext:
    def test_sets_and_restores_context(self):
        assert get_correlation_id() is None

        with LogContext(correlation_id="cor_fixed", identifier="0x12"):
            assert get_correlation_id() == "cor_fixed"
            record = _record()
            CorrelationIDFilter().filter(record)
            assert record.identifier == "0x12"
            assert record.job_id is None

        assert get_correlation_id() is None

    def test_generates_correlation_id(self):
        with LogContext() as ctx:
            assert ctx.correlation_id.startswith("cor_")
            assert get_correlation_id() == ctx.correlation_id

    def test_job_context_is_scoped(self):
        with LogContext():
            set_job_context("job_1")
            record = _record()
            CorrelationIDFilter().filter(record)
            assert record.job_id == "job_1"

        record = _record()
        CorrelationIDFilter().filter(record)
        assert record.job_id is None


class TestStructuredFormatter:
    def test_emits_json_with_context_and_extras(self):
        record = _record("topped up", correlation_id="cor_1", job_id=None, error_code="X")

        payload = json.loads(StructuredFormatter().format(record))

        assert payload["message"] == "topped up"
        assert payload["level"] == "INFO"
        assert payload["correlation_id"] == "cor_1"
        assert payload["error_code"] == "X"
        assert "job_id" not in payload


class TestSetupLogging:
    @pytest.fixture
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield root
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_installs_single_filtered_handler(self, restore_root):
        setup_logging("DEBUG", json_format=True)

        assert restore_root.level == logging.DEBUG
        assert len(restore_root.handlers) == 1
        handler = restore_root.handlers[0]
        assert isinstance(handler.formatter, StructuredFormatter)
        assert any(isinstance(f, CorrelationIDFilter) for f in handler.filters)
