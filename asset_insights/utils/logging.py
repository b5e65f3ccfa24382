# asset_insights/utils/logging.py
"""
Logging configuration for Asset Insights.

One call to setup_logging() at startup configures the root logger:
- Level from LOG_LEVEL (DEBUG shows every degraded-mode fallback the
  valuation engine takes: missing quotes, missing rates)
- Text or JSON output from LOG_FORMAT
- Correlation ID on every record
- Third-party HTTP/server chatter capped at WARNING

Usage:
    from asset_insights.utils import setup_logging

    setup_logging()                       # settings-driven
    setup_logging(level="DEBUG")          # local debugging
    setup_logging(log_format="json")      # log aggregation
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from asset_insights.config import settings
from asset_insights.utils.context import get_correlation_id

# =============================================================================
# CONSTANTS
# =============================================================================

# time | level | correlation_id | logger | message
DEFAULT_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(correlation_id)s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NO_CORRELATION_ID = "no-correlation-id"

NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "asyncio",
    "uvicorn.access",
)

LOG_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# LogRecord attributes that are not user-supplied "extra" fields
_RESERVED_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"correlation_id", "message", "asctime", "taskName"}


# =============================================================================
# FILTER / FORMATTER
# =============================================================================

class CorrelationIdFilter(logging.Filter):
    """Stamps every record with the current request's correlation ID."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return True


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line, for log aggregation.

    Output:
    {
        "timestamp": "2024-01-15T10:30:00.123456+00:00",
        "level": "INFO",
        "logger": "asset_insights.services.valuation.service",
        "correlation_id": "abc-123",
        "message": "Valued 4 holdings in TWD: ...",
        "extra": {...}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "correlation_id": getattr(record, "correlation_id", NO_CORRELATION_ID),
            "message": record.getMessage(),
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extra = {
            key: _json_safe(value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_ATTRS
        }
        if extra:
            entry["extra"] = extra

        return json.dumps(entry)


def _json_safe(value: Any) -> Any:
    """Return value if JSON-serializable, else its str()."""
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


# =============================================================================
# SETUP
# =============================================================================

def setup_logging(
        level: str | None = None,
        log_format: str | None = None,
        suppress_noisy_loggers: bool = True,
) -> None:
    """
    Configure application-wide logging.

    Args:
        level: Log level name; defaults to settings.log_level
        log_format: "text" or "json"; defaults to settings.log_format
        suppress_noisy_loggers: Cap NOISY_LOGGERS at WARNING

    Raises:
        ValueError: If level is not a known log level name
    """
    level_name = level or settings.log_level
    log_level = _get_log_level(level_name)
    format_type = (log_format or settings.log_format).lower()

    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=DEFAULT_TEXT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIdFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    if suppress_noisy_loggers:
        for logger_name in NOISY_LOGGERS:
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"Logging configured: level={level_name}, format={format_type}",
        extra={"config": {"level": level_name, "format": format_type}},
    )


def _get_log_level(level_name: str) -> int:
    """Map a case-insensitive level name to its logging constant."""
    key = level_name.strip().upper()
    if key not in LOG_LEVELS:
        raise ValueError(
            f"Invalid log level: '{level_name}'. "
            f"Valid levels are: {', '.join(LOG_LEVELS)}"
        )
    return LOG_LEVELS[key]


def get_logger(name: str) -> logging.Logger:
    """Module logger; correlation IDs come from the handler filter."""
    return logging.getLogger(name)
