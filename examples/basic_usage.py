"""Basic applogger usage.

Run with:
    python examples/basic_usage.py

Writes three entries to app.log in the current directory:
    - an INFO entry carrying fields from a context
    - a DEBUG entry carrying a derived logger's default fields
    - a WARN HTTP entry with status code and duration
"""

import sys
import time

from applogger import Level, Logger, SinkOpenError, context_with_fields


def main() -> int:
    try:
        logger = Logger.open("app.log")
    except SinkOpenError as e:
        print(f"Failed to initialize logger: {e}", file=sys.stderr)
        return 1

    with logger:
        # Fields carried by a context
        ctx = context_with_fields(
            {"user_id": "user-001", "session_id": "sess-abc", "custom": "extra info"}
        )
        logger.log(ctx, Level.INFO, "Logging with context extra fields")

        # Default fields attached to a derived logger
        service_logger = logger.with_fields(service="myservice", version="2.0")
        service_logger.log(
            None, Level.DEBUG, "Logging with default fields from with_fields"
        )

        # An HTTP event
        logger.log_http(None, Level.WARN, "HTTP event occurred", 404, 0.567)

        time.sleep(0.5)
    return 0


if __name__ == "__main__":
    sys.exit(main())
