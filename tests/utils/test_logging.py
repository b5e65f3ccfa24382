# tests/utils/test_logging.py
"""
Tests for logging setup, filter and JSON formatter.
"""

import json
import logging

import pytest

from asset_insights.utils.context import clear_correlation_id, set_correlation_id
from asset_insights.utils.logging import (
    NO_CORRELATION_ID,
    CorrelationIdFilter,
    JsonFormatter,
    _get_log_level,
    setup_logging,
)


def make_record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="asset_insights.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=None,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestCorrelationIdFilter:

    def test_adds_current_id(self):
        set_correlation_id("req-1")
        try:
            record = make_record()
            assert CorrelationIdFilter().filter(record) is True
            assert record.correlation_id == "req-1"
        finally:
            clear_correlation_id()

    def test_placeholder_outside_request(self):
        clear_correlation_id()
        record = make_record()

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == NO_CORRELATION_ID


class TestJsonFormatter:

    def test_core_fields(self):
        record = make_record("valued 3 holdings", correlation_id="abc")

        entry = json.loads(JsonFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "asset_insights.test"
        assert entry["correlation_id"] == "abc"
        assert entry["message"] == "valued 3 holdings"
        assert "extra" not in entry

    def test_extra_fields(self):
        record = make_record(holdings=3, currency="TWD")

        entry = json.loads(JsonFormatter().format(record))

        assert entry["extra"] == {"holdings": 3, "currency": "TWD"}

    def test_non_serializable_extra_is_stringified(self):
        record = make_record(payload={1, 2})

        entry = json.loads(JsonFormatter().format(record))

        assert isinstance(entry["extra"]["payload"], str)


class TestSetupLogging:

    @pytest.mark.parametrize(
        "name,level",
        [("debug", logging.DEBUG), (" WARN ", logging.WARNING), ("ERROR", logging.ERROR)],
    )
    def test_level_names(self, name, level):
        assert _get_log_level(name) == level

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            _get_log_level("LOUD")

    def test_json_format_installs_json_formatter(self, restore_root_logger):
        setup_logging(level="INFO", log_format="json")

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert any(isinstance(f, CorrelationIdFilter) for f in root.handlers[0].filters)

    def test_noisy_loggers_capped(self, restore_root_logger):
        setup_logging(level="DEBUG", log_format="text")

        assert logging.getLogger("httpx").level == logging.WARNING
