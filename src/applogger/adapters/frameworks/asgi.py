"""ASGI access-log middleware.

Wraps any ASGI application (Starlette, FastAPI, Django ASGI, plain
callables) and writes one HTTP entry per request through a Logger.
"""

import fnmatch
import time
import uuid
from collections.abc import Callable, Coroutine
from typing import Any

from applogger.core.levels import Level
from applogger.core.logger import Logger
from applogger.core.logging_context import (
    FIELDS_KEY,
    LogContext,
    current_context,
    fields_from_context,
    log_context,
)

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]


def _extract_request_id(scope: Scope, header_name: str = "X-Request-ID") -> str:
    """Extract or generate a request ID from ASGI scope headers.

    Searches for the specified header (case-insensitive). If not found,
    generates a new UUID.

    Args:
        scope: ASGI scope dictionary containing request metadata.
        header_name: Name of the header to search for (default: "X-Request-ID").

    Returns:
        Request ID string (either from header or newly generated UUID).
    """
    header_bytes = header_name.lower().encode()
    headers: list[tuple[bytes, bytes]] = scope.get("headers", [])
    for name, value in headers:
        if name.lower() == header_bytes:
            return value.decode("utf-8", errors="replace")

    return str(uuid.uuid4())


def _get_log_level_for_status(status_code: int) -> Level:
    """Determine log level based on HTTP status code.

    Maps status codes to log levels:
    - 400-499 (4xx) → WARN
    - 500-599 (5xx) → ERROR
    - Other → INFO
    """
    if 400 <= status_code < 500:
        return Level.WARN
    if 500 <= status_code < 600:
        return Level.ERROR
    return Level.INFO


class AccessLogMiddleware:
    """ASGI middleware that writes an access log entry per HTTP request.

    The wrapped app runs with ``request_id`` in the ambient log context, so
    entries it writes through ``Logger.log(current_context(), ...)`` carry
    the same request ID as the access entry.
    """

    def __init__(
        self,
        app: ASGIApp,
        logger: Logger,
        exclude_paths: list[str] | None = None,
        request_id_header: str = "X-Request-ID",
    ) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application to wrap.
            logger: Logger receiving the access entries.
            exclude_paths: Paths that are not logged. Supports exact
                          matches and wildcard patterns (e.g., "/internal/*").
            request_id_header: Name of the header to extract request ID from
                             (default: "X-Request-ID").
        """
        self.app = app
        self.logger = logger
        self.exclude_paths = exclude_paths or []
        self.request_id_header = request_id_header
        self.log_requests = True

    def set_log_requests(self, enabled: bool) -> None:
        """Enable or disable access logging without unwrapping the app."""
        self.log_requests = enabled

    def _path_excluded(self, path: str) -> bool:
        """Check if path matches any pattern in exclude_paths."""
        return any(fnmatch.fnmatch(path, pattern) for pattern in self.exclude_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI callable interface that processes requests through the wrapped app."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        request_id = _extract_request_id(scope, self.request_id_header)
        captured: dict[str, Any] = {"status": None, "exception": None}

        async def wrapped_send(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                captured["status"] = message["status"]
            await send(message)

        with log_context(request_id=request_id):
            try:
                await self.app(scope, receive, wrapped_send)
            except Exception as e:
                captured["exception"] = e
                captured["status"] = 500
            ctx = current_context()

        duration = time.perf_counter() - start_time
        self._write_access_entry(scope, ctx, captured, duration)
        if captured["exception"] is not None:
            raise captured["exception"]

    def _write_access_entry(
        self,
        scope: Scope,
        ctx: LogContext,
        captured: dict[str, Any],
        duration: float,
    ) -> None:
        """Write the access entry unless logging is off or the path is excluded."""
        if not self.log_requests or self._path_excluded(scope["path"]):
            return
        status = captured["status"] or 0
        exc = captured["exception"]
        if exc is not None:
            fields = fields_from_context(ctx)
            fields["exception"] = f"{type(exc).__name__}: {exc!s}"
            ctx = {FIELDS_KEY: fields}
        self.logger.log_http(
            ctx,
            _get_log_level_for_status(status),
            f"{scope['method']} {scope['path']}",
            status,
            duration,
        )

