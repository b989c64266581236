"""Shared test fixtures for all test modules."""

import io
import json
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest

from applogger.adapters.frameworks.asgi import ASGIApp, Receive, Scope, Send
from applogger.core.logger import Logger


class RecordingTerminator:
    """Terminator stub that records exit statuses instead of exiting."""

    def __init__(self) -> None:
        self.calls: list[int] = []

    def __call__(self, status: int) -> None:
        self.calls.append(status)


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    """Provide a temporary NDJSON file path."""
    return tmp_path / "app.ndjson"


@pytest.fixture
def terminator() -> RecordingTerminator:
    """Provide a terminator that never ends the test process."""
    return RecordingTerminator()


@pytest.fixture
def file_logger(log_path: Path, terminator: RecordingTerminator) -> Iterator[Logger]:
    """Logger appending to log_path, closed after the test."""
    logger = Logger.open(log_path, terminator=terminator)
    yield logger
    logger.close()


@pytest.fixture
def stream() -> io.StringIO:
    """In-memory text stream for loggers built with from_streams."""
    return io.StringIO()


@pytest.fixture
def stream_logger(stream: io.StringIO, terminator: RecordingTerminator) -> Logger:
    """Logger writing to the in-memory stream fixture."""
    return Logger.from_streams(stream, terminator=terminator)


@pytest.fixture
def read_entries() -> Callable[[Path | io.StringIO], list[dict[str, Any]]]:
    """Factory fixture parsing every line of a file or stream as JSON.

    Usage:
        def test_something(file_logger, log_path, read_entries):
            file_logger.info("hello")
            assert read_entries(log_path)[0]["message"] == "hello"
    """

    def _read(source: Path | io.StringIO) -> list[dict[str, Any]]:
        if isinstance(source, io.StringIO):
            text = source.getvalue()
        else:
            text = source.read_text(encoding="utf-8")
        return [json.loads(line) for line in text.split("\n") if line]

    return _read


# === ASGI Test Fixtures ===


@pytest.fixture
def basic_asgi_app() -> ASGIApp:
    """Basic ASGI app fixture that returns 200 OK."""

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        """Simple ASGI app that returns 200 OK."""
        await send({"type": "http.response.start", "status": 200, "headers": []})
        await send({"type": "http.response.body", "body": b"OK"})

    return app


@pytest.fixture
def asgi_scope() -> Callable[..., Scope]:
    """Factory fixture for creating ASGI scope dicts."""

    def _scope(method: str = "GET", path: str = "/test") -> Scope:
        return {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": b"",
            "headers": [],
        }

    return _scope


@pytest.fixture
def asgi_receive() -> Receive:
    """Receive callable yielding one empty request body."""

    async def receive() -> dict[str, Any]:
        return {"type": "http.request", "body": b""}

    return receive


@pytest.fixture
def asgi_send_capture() -> tuple[Send, list[dict[str, Any]]]:
    """Fixture that returns a send callable and a responses list for capture."""
    responses: list[dict[str, Any]] = []

    async def send(message: dict[str, Any]) -> None:
        """Capture ASGI messages."""
        responses.append(message)

    return send, responses


@pytest.fixture
def asgi_test_client() -> Callable[[ASGIApp], httpx.AsyncClient]:
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            async with asgi_test_client(app) as client:
                response = await client.get("/endpoint")
    """

    def _get_client(app: ASGIApp) -> httpx.AsyncClient:
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client
