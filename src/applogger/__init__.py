"""applogger - structured NDJSON logging with caller attribution."""

from applogger.adapters.frameworks.asgi import AccessLogMiddleware
from applogger.adapters.logging import AppLoggerHandler
from applogger.core.caller import (
    NullAttribution,
    StackAttribution,
    identify_caller,
    split_symbol,
)
from applogger.core.encoding.ndjson import encode_entry, encode_logs
from applogger.core.exceptions import (
    AppLoggerError,
    EntryEncodingError,
    SinkOpenError,
)
from applogger.core.fields import resolve_attributes
from applogger.core.levels import Level, severity_name
from applogger.core.logger import Logger, exit_process
from applogger.core.logging_context import (
    FIELDS_KEY,
    LogContext,
    clear_log_context,
    context_with_fields,
    current_context,
    fields_from_context,
    get_log_context,
    log_context,
    set_log_context,
    update_log_context,
)
from applogger.core.models import AttributeValue, LogEntry
from applogger.core.ports import AttributionProvider, Terminator
from applogger.core.sink import Sink

__version__ = "0.3.0"

__all__ = [
    "FIELDS_KEY",
    "AccessLogMiddleware",
    "AppLoggerError",
    "AppLoggerHandler",
    "AttributeValue",
    "AttributionProvider",
    "EntryEncodingError",
    "Level",
    "LogContext",
    "LogEntry",
    "Logger",
    "NullAttribution",
    "Sink",
    "SinkOpenError",
    "StackAttribution",
    "Terminator",
    "clear_log_context",
    "context_with_fields",
    "current_context",
    "encode_entry",
    "encode_logs",
    "exit_process",
    "fields_from_context",
    "get_log_context",
    "identify_caller",
    "log_context",
    "resolve_attributes",
    "set_log_context",
    "severity_name",
    "split_symbol",
    "update_log_context",
]
