"""Shared, lock-guarded destination for serialized log lines."""

import os
import threading
from collections.abc import Sequence
from datetime import datetime
from typing import TextIO

from applogger.core.exceptions import SinkOpenError

# A stream that failed and the error it raised
StreamFailure = tuple[TextIO, Exception]


class Sink:
    """One or more text streams written as a single destination.

    Every Logger derived from the same root shares one Sink, and with it one
    lock, so lines from any of them are written whole and in lock order.

    Methods other than ``open`` expect the caller to hold ``lock``. They
    report stream failures to the caller instead of logging them, so nothing
    is logged while the lock is held.
    """

    def __init__(self, streams: Sequence[TextIO], *, owned: bool = False) -> None:
        """Initialize the sink over already-open streams.

        Args:
            streams: Text streams to fan each line out to.
            owned: True if ``close`` should close the streams. Streams
                handed in by the caller (stdout, StringIO) are left open.

        Raises:
            ValueError: If no stream is given.
        """
        if not streams:
            raise ValueError("a sink needs at least one stream")
        self._streams = list(streams)
        self._owned = owned
        self.lock = threading.Lock()
        self.closed = False
        # Timestamp of the last entry written, used to keep entries ordered
        self.last_timestamp: datetime | None = None

    @classmethod
    def open(cls, *paths: str | os.PathLike[str], encoding: str = "utf-8") -> "Sink":
        """Open files for create-or-append writing.

        Args:
            *paths: One or more file paths.
            encoding: Text encoding of the files.

        Raises:
            SinkOpenError: If any path cannot be opened. Files opened before
                the failure are closed again.
        """
        if not paths:
            raise ValueError("at least one path is required")
        streams: list[TextIO] = []
        for path in paths:
            try:
                streams.append(open(path, "a", encoding=encoding, newline="\n"))
            except OSError as exc:
                for stream in streams:
                    stream.close()
                raise SinkOpenError(
                    exc.errno, f"cannot open log file: {exc.strerror}", os.fspath(path)
                ) from exc
        return cls(streams, owned=True)

    def write_line(self, line: str) -> list[StreamFailure]:
        """Write one line to every stream and flush it.

        A failing stream does not stop the others.

        Returns:
            The streams the line could not be written to, with their errors.
        """
        failures: list[StreamFailure] = []
        for stream in self._streams:
            try:
                stream.write(line + "\n")
                stream.flush()
            except (OSError, ValueError) as exc:
                # ValueError covers streams closed behind our back
                failures.append((stream, exc))
        return failures

    def close(self) -> list[StreamFailure] | None:
        """Flush all streams and close the owned ones.

        Returns:
            None if the sink was already closed, otherwise the streams that
            failed to flush or close.
        """
        if self.closed:
            return None
        self.closed = True
        failures: list[StreamFailure] = []
        for stream in self._streams:
            try:
                if self._owned:
                    stream.close()
                else:
                    stream.flush()
            except (OSError, ValueError) as exc:
                failures.append((stream, exc))
        return failures
