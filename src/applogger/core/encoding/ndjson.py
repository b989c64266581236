"""NDJSON encoder for log entries."""

import json
from collections.abc import Iterable

from applogger.core.exceptions import EntryEncodingError
from applogger.core.models import LogEntry


def encode_entry(entry: LogEntry) -> str:
    """Encode one log entry as a single JSON line.

    Args:
        entry: The entry to encode.

    Returns:
        A JSON object on one line, without the trailing newline.

    Raises:
        EntryEncodingError: If an attribute holds a value JSON cannot
            represent, or a float that is NaN or infinite.
    """
    try:
        return json.dumps(
            entry.to_dict(),
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError) as exc:
        raise EntryEncodingError(f"could not encode log entry: {exc}") from exc


def encode_logs(entries: Iterable[LogEntry]) -> str:
    """Encode log entries to newline-delimited JSON.

    Args:
        entries: An iterable of LogEntry objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no entries.
    """
    lines = [encode_entry(entry) for entry in entries]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
