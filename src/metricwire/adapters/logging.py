"""Python logging setup for metricwire applications.

Library modules only create loggers; applications call ``setup_logging``
once at startup to install a handler on the root logger.
"""

import json
import logging
import sys
from typing import Any, TextIO

from metricwire.config import LoggingConfig

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

logger = logging.getLogger("metricwire")


class StructuredFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects.

    Extra fields passed via ``logger.info(..., extra={...})`` are included
    when they are plain scalars.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a record as JSON.

        Args:
            record: The log record to format.
        """
        log_record: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }

        # Add any extra attributes passed via logging call
        for key, value in record.__dict__.items():
            if key not in _STANDARD_LOGRECORD_ATTRS and isinstance(
                value, (str, int, float, bool)
            ):
                log_record[key] = value

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record)


def setup_logging(
    config: LoggingConfig | None = None, stream: TextIO | None = None
) -> logging.Handler:
    """Install a stream handler on the root logger.

    Args:
        config: Level and format ("json" or "text"). Defaults to LoggingConfig().
        stream: Destination stream (default: stdout).

    Returns:
        The installed handler, so callers can remove it again.
    """
    config = config or LoggingConfig()
    handler = logging.StreamHandler(stream or sys.stdout)
    if config.format == "json":
        handler.setFormatter(StructuredFormatter(datefmt=_DATE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt=_DATE_FORMAT))
    root = logging.getLogger()
    root.setLevel(config.level)
    root.addHandler(handler)
    return handler


def log_exception(message: str, **attributes: str | int | float | bool) -> None:
    """Log the exception currently being handled at ERROR level.

    Args:
        message: Description of what failed.
        **attributes: Additional structured fields.
    """
    logger.exception(message, extra=attributes)
