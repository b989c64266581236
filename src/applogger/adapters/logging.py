"""Python logging handler adapter for applogger.

This adapter bridges Python's standard library logging module to a
Logger, so records from libraries that use ``logging`` end up in the same
NDJSON sink as the application's own entries.
"""

import logging
import traceback
from typing import Any

from applogger.core.levels import Level
from applogger.core.logger import Logger
from applogger.core.logging_context import FIELDS_KEY, get_log_context
from applogger.core.models import UNKNOWN_CALLER

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

# Records from this namespace are applogger's own diagnostics
_DIAGNOSTIC_NAMESPACE = "applogger"


class _DiagnosticFilter(logging.Filter):
    """Reject records from the applogger diagnostic namespace.

    Runs in ``Handler.handle`` before the handler lock is taken, so a
    diagnostic logged by a Logger never waits on a handler that is itself
    waiting on that Logger.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.name.partition(".")[0] != _DIAGNOSTIC_NAMESPACE


def _level_for_record(levelno: int) -> Level:
    """Map a stdlib level number to a Level.

    CRITICAL maps to ERROR: a stdlib record never ends the process.
    """
    if levelno >= logging.ERROR:
        return Level.ERROR
    if levelno >= logging.WARNING:
        return Level.WARN
    if levelno >= logging.INFO:
        return Level.INFO
    return Level.DEBUG


class AppLoggerHandler(logging.Handler):
    """Logging handler that writes log records through a Logger.

    Example:
        ```python
        from applogger import AppLoggerHandler, Logger

        logger = Logger.open("app.log")
        logging.getLogger().addHandler(AppLoggerHandler(logger))
        ```
    """

    def __init__(self, logger: Logger, level: int = logging.NOTSET) -> None:
        """Initialize the handler.

        Args:
            logger: Destination for forwarded records.
            level: Minimum stdlib level to forward.
        """
        super().__init__(level)
        self._logger = logger
        self.addFilter(_DiagnosticFilter())

    def emit(self, record: logging.LogRecord) -> None:
        """Forward a log record to the Logger.

        Args:
            record: The log record to emit.
        """
        try:
            attributes = self._build_attributes(record)
            self._logger.log_as(
                (record.name, record.funcName or UNKNOWN_CALLER),
                {FIELDS_KEY: attributes},
                _level_for_record(record.levelno),
                record.getMessage(),
            )
        except Exception:
            self.handleError(record)

    def _build_attributes(self, record: logging.LogRecord) -> dict[str, Any]:
        """Ambient log context overlaid by the record's extras."""
        attributes = get_log_context()

        # Add any extra attributes passed via logging call
        for key, value in record.__dict__.items():
            if key not in _STANDARD_LOGRECORD_ATTRS and isinstance(
                value, (str, int, float, bool, list, dict)
            ):
                attributes[key] = value

        # Extract exception info if present
        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            if exc_type is not None:
                attributes["exc_type"] = exc_type.__name__
            if exc_value is not None:
                attributes["exc_message"] = str(exc_value)
            if exc_tb is not None:
                attributes["exc_traceback"] = "".join(
                    traceback.format_exception(exc_type, exc_value, exc_tb)
                )
        return attributes
