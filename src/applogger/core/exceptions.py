"""Exceptions raised by applogger."""


class AppLoggerError(Exception):
    """Base class for applogger errors."""


class SinkOpenError(AppLoggerError, OSError):
    """A log destination could not be opened for appending."""


class EntryEncodingError(AppLoggerError, ValueError):
    """A log entry could not be serialized to JSON."""
