"""Plain ASGI application with access logging.

Run with:
    uvicorn examples.asgi_example:app

Every request produces an HTTP entry in access.log. Entries written by
the app itself, directly or through the stdlib ``logging`` bridge, share
the request's ``request_id`` field.
"""

import logging

from applogger import (
    AccessLogMiddleware,
    AppLoggerHandler,
    Level,
    Logger,
    current_context,
)
from applogger.adapters.frameworks.asgi import Receive, Scope, Send

logger = Logger.open("access.log").with_fields(service="asgi-example")

# Route stdlib logging through the same sink
logging.getLogger("examples").addHandler(AppLoggerHandler(logger))
logging.getLogger("examples").setLevel(logging.INFO)
stdlib_logger = logging.getLogger("examples.asgi")


async def hello_app(scope: Scope, receive: Receive, send: Send) -> None:
    """Answer every request with a greeting, or 404 for /missing."""
    if scope["path"] == "/missing":
        stdlib_logger.warning("no such page", extra={"path": scope["path"]})
        status, body = 404, b"not found"
    else:
        logger.log(current_context(), Level.INFO, "saying hello")
        status, body = 200, b"hello"
    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": [(b"content-type", b"text/plain")],
        }
    )
    await send({"type": "http.response.body", "body": body})


app = AccessLogMiddleware(hello_app, logger, exclude_paths=["/health"])
