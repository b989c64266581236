"""Core domain models for log events."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# Value kinds an attribute may carry. Tuples are accepted and encoded as lists.
AttributeValue = (
    str
    | int
    | float
    | bool
    | None
    | list["AttributeValue"]
    | dict[str, "AttributeValue"]
)

UNKNOWN_CALLER = "unknown"

# Format of the per-event identifier derived from the entry timestamp
PID_FORMAT = "%Y%m%d%H%M%S"


@dataclass(frozen=True)
class LogEntry:
    """A single structured log event.

    Attributes:
        pid: Event identifier derived from the creation time.
        level: Severity name (e.g., INFO, ERROR).
        package: Component the log call came from.
        func: Operation the log call came from.
        message: The log message.
        timestamp: Timezone-aware creation time.
        code: HTTP status code, 0 when not applicable.
        duration: Request duration in seconds, 0 when not applicable.
        attributes: Additional structured fields.
    """

    pid: str
    level: str
    package: str
    func: str
    message: str
    timestamp: datetime
    code: int = 0
    duration: float = 0.0
    attributes: dict[str, AttributeValue] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Build the wire object for this entry.

        ``code`` and ``duration`` appear only when non-zero and
        ``attributes`` only when non-empty.
        """
        obj: dict[str, Any] = {
            "pid": self.pid,
            "level": self.level,
            "package": self.package,
            "func": self.func,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(timespec="microseconds"),
        }
        if self.code:
            obj["code"] = self.code
        if self.duration:
            obj["duration"] = self.duration
        if self.attributes:
            obj["attributes"] = self.attributes
        return obj
