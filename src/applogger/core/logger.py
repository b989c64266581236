"""Leveled NDJSON logger writing to a shared sink."""

import logging
import os
import sys
from collections.abc import Mapping
from datetime import datetime, timezone
from types import MappingProxyType, TracebackType
from typing import Any, TextIO

from applogger.core.caller import StackAttribution
from applogger.core.encoding.ndjson import encode_entry
from applogger.core.exceptions import EntryEncodingError
from applogger.core.fields import resolve_attributes
from applogger.core.levels import Level, severity_name
from applogger.core.logging_context import LogContext, fields_from_context
from applogger.core.models import PID_FORMAT, LogEntry
from applogger.core.ports import AttributionProvider, Terminator
from applogger.core.sink import Sink, StreamFailure

_logger = logging.getLogger(__name__)

FATAL_EXIT_STATUS = 1


def _now() -> datetime:
    """Current wall-clock time in UTC."""
    return datetime.now(timezone.utc)


def _log_stream_failures(msg: str, failures: list[StreamFailure]) -> None:
    for stream, exc in failures:
        _logger.error(msg, stream, exc_info=exc)


def exit_process(status: int) -> None:
    """Default Terminator: flush stdio and end the process immediately.

    ``os._exit`` ends the whole process even when called from a worker
    thread, where ``sys.exit`` would only end that thread.
    """
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (AttributeError, OSError, ValueError):
            pass
    os._exit(status)


class Logger:
    """Structured logger emitting one JSON object per line.

    Safe to share across threads. Loggers derived with ``with_fields``
    share the sink and its lock with their parent, so their lines never
    interleave and closing any of them closes the sink for all.

    Example:
        ```python
        from applogger import Level, Logger, context_with_fields

        with Logger.open("app.log") as logger:
            ctx = context_with_fields({"request_id": "abc"})
            logger.log(ctx, Level.INFO, "Application started")
        ```
    """

    def __init__(
        self,
        sink: Sink,
        *,
        fields: Mapping[str, Any] | None = None,
        attribution: AttributionProvider | None = None,
        terminator: Terminator | None = None,
    ) -> None:
        """Initialize the logger over an open sink.

        Args:
            sink: Destination shared by this logger and its derivatives.
            fields: Default attributes added to every entry.
            attribution: Resolves the calling component and operation.
                Defaults to StackAttribution.
            terminator: Called with the exit status after a FATAL entry.
                Defaults to exit_process.
        """
        self._sink = sink
        self._fields: Mapping[str, Any] = MappingProxyType(dict(fields or {}))
        self._attribution = attribution or StackAttribution()
        self._terminator = terminator or exit_process

    @classmethod
    def open(
        cls,
        path: str | os.PathLike[str],
        *more_paths: str | os.PathLike[str],
        encoding: str = "utf-8",
        fields: Mapping[str, Any] | None = None,
        attribution: AttributionProvider | None = None,
        terminator: Terminator | None = None,
    ) -> "Logger":
        """Create a logger appending to one or more files.

        Files are created if missing. Every line goes to every file.

        Raises:
            SinkOpenError: If a file cannot be opened for appending.
        """
        sink = Sink.open(path, *more_paths, encoding=encoding)
        return cls(sink, fields=fields, attribution=attribution, terminator=terminator)

    @classmethod
    def from_streams(
        cls,
        stream: TextIO,
        *more_streams: TextIO,
        fields: Mapping[str, Any] | None = None,
        attribution: AttributionProvider | None = None,
        terminator: Terminator | None = None,
    ) -> "Logger":
        """Create a logger writing to already-open text streams.

        The streams stay open after ``close``; they belong to the caller.
        """
        sink = Sink([stream, *more_streams])
        return cls(sink, fields=fields, attribution=attribution, terminator=terminator)

    @property
    def fields(self) -> Mapping[str, Any]:
        """Read-only view of the default attributes."""
        return self._fields

    @property
    def closed(self) -> bool:
        """True once the shared sink has been closed."""
        return self._sink.closed

    def with_fields(
        self, fields: Mapping[str, Any] | None = None, **extra: Any
    ) -> "Logger":
        """Derive a logger with additional default attributes.

        The new logger shares this logger's sink. Its defaults are this
        logger's defaults overlaid by ``fields`` and then ``extra``. This
        logger is left unchanged.
        """
        merged = resolve_attributes(self._fields, fields)
        merged.update(extra)
        return Logger(
            self._sink,
            fields=merged,
            attribution=self._attribution,
            terminator=self._terminator,
        )

    def close(self) -> None:
        """Close the shared sink.

        Waits for an in-flight write to finish. Calling it again is a no-op.
        """
        with self._sink.lock:
            failures = self._sink.close()

        if failures is None:
            _logger.debug("close() called on an already closed logger")
            return
        _log_stream_failures("failed to close log stream %r", failures)

    def __enter__(self) -> "Logger":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    # --- Public entry points ---
    # Each must call _emit directly: attribution counts frames from there.

    def log(
        self,
        ctx: LogContext,
        level: Level | int,
        message: str,
        *,
        stacklevel: int = 1,
    ) -> None:
        """Write an entry with the fields carried by ``ctx``.

        Args:
            ctx: Context carrying an optional field-set, or None.
            level: Severity. FATAL terminates the process after the write.
            message: The log message.
            stacklevel: Which caller to attribute the entry to. 1 is the
                function calling ``log``, 2 its caller, and so on.
        """
        self._emit(ctx, level, message, 0, 0.0, stacklevel, None)

    def log_http(
        self,
        ctx: LogContext,
        level: Level | int,
        message: str,
        code: int,
        duration: float,
        *,
        stacklevel: int = 1,
    ) -> None:
        """Write an entry describing an HTTP exchange.

        Args:
            ctx: Context carrying an optional field-set, or None.
            level: Severity. FATAL terminates the process after the write.
            message: The log message.
            code: HTTP status code. Omitted from the line when 0.
            duration: Request duration in seconds. Omitted when 0.
            stacklevel: Which caller to attribute the entry to.
        """
        self._emit(ctx, level, message, code, duration, stacklevel, None)

    def log_as(
        self,
        caller: tuple[str, str],
        ctx: LogContext,
        level: Level | int,
        message: str,
        code: int = 0,
        duration: float = 0.0,
    ) -> None:
        """Write an entry attributed to an explicit (package, func) pair.

        For bridges that already know the origin of an event, such as
        stdlib logging records.
        """
        self._emit(ctx, level, message, code, duration, 0, caller)

    def debug(
        self, message: str, ctx: LogContext = None, *, stacklevel: int = 1
    ) -> None:
        """Write a DEBUG entry."""
        self._emit(ctx, Level.DEBUG, message, 0, 0.0, stacklevel, None)

    def info(
        self, message: str, ctx: LogContext = None, *, stacklevel: int = 1
    ) -> None:
        """Write an INFO entry."""
        self._emit(ctx, Level.INFO, message, 0, 0.0, stacklevel, None)

    def warn(
        self, message: str, ctx: LogContext = None, *, stacklevel: int = 1
    ) -> None:
        """Write a WARN entry."""
        self._emit(ctx, Level.WARN, message, 0, 0.0, stacklevel, None)

    def error(
        self, message: str, ctx: LogContext = None, *, stacklevel: int = 1
    ) -> None:
        """Write an ERROR entry."""
        self._emit(ctx, Level.ERROR, message, 0, 0.0, stacklevel, None)

    def fatal(
        self, message: str, ctx: LogContext = None, *, stacklevel: int = 1
    ) -> None:
        """Write a FATAL entry, then terminate the process."""
        self._emit(ctx, Level.FATAL, message, 0, 0.0, stacklevel, None)

    # --- Emission ---

    def _emit(
        self,
        ctx: LogContext,
        level: Level | int,
        message: str,
        code: int,
        duration: float,
        stacklevel: int,
        caller: tuple[str, str] | None,
    ) -> None:
        """Build, encode and write one entry.

        Must be called directly by a public entry point.
        """
        if caller is None:
            # 0 is _emit, 1 the public entry point, 2 its caller
            package, func = self._attribution.caller(1 + stacklevel)
        else:
            package, func = caller
        attributes = resolve_attributes(self._fields, fields_from_context(ctx))

        encode_error: EntryEncodingError | None = None
        failures: list[StreamFailure] = []
        with self._sink.lock:
            closed = self._sink.closed
            if not closed:
                encode_error, failures = self._write(
                    level, package, func, message, code, duration, attributes
                )

        # Diagnostics are logged with the lock released: a handler bridging
        # stdlib logging into this logger needs the same lock.
        if closed:
            _logger.warning("dropped log entry: logger is closed")
        if encode_error is not None:
            _logger.error(
                "could not marshal log entry %r", message, exc_info=encode_error
            )
        _log_stream_failures("failed to write log line to %r", failures)

        # An entry that could not be encoded never terminates
        if level == Level.FATAL and encode_error is None:
            self._terminator(FATAL_EXIT_STATUS)

    def _write(
        self,
        level: Level | int,
        package: str,
        func: str,
        message: str,
        code: int,
        duration: float,
        attributes: dict[str, Any],
    ) -> tuple[EntryEncodingError | None, list[StreamFailure]]:
        """Encode and write an entry. Caller holds the sink lock.

        Returns:
            The encoding error, if any, and the streams that failed.
        """
        timestamp = _now()
        last = self._sink.last_timestamp
        if last is not None and timestamp < last:
            timestamp = last

        entry = LogEntry(
            pid=timestamp.strftime(PID_FORMAT),
            level=severity_name(level),
            package=package,
            func=func,
            message=message,
            timestamp=timestamp,
            code=code,
            duration=duration,
            attributes=attributes,
        )
        try:
            line = encode_entry(entry)
        except EntryEncodingError as exc:
            return exc, []

        failures = self._sink.write_line(line)
        self._sink.last_timestamp = timestamp
        return None, failures
