"""Severity levels for log entries."""

from enum import IntEnum

UNKNOWN_LEVEL = "UNKNOWN"

# Accepted spellings that differ from the canonical names
_ALIASES = {"WARNING": "WARN"}


class Level(IntEnum):
    """Log severity, ordered from least to most severe.

    FATAL is the terminal level: emitting it ends the process.
    """

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4

    def __str__(self) -> str:
        return self.name

    @classmethod
    def from_name(cls, name: str) -> "Level":
        """Look up a level by name (case-insensitive).

        Args:
            name: Level name such as "info" or "WARNING".

        Returns:
            The matching Level.

        Raises:
            ValueError: If the name is not a known level.
        """
        key = name.strip().upper()
        key = _ALIASES.get(key, key)
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"unknown log level: {name!r}") from None


def severity_name(level: object) -> str:
    """Return the canonical uppercase name of a level.

    Total over any input: undeclared values map to "UNKNOWN".
    """
    if isinstance(level, bool) or not isinstance(level, int):
        return UNKNOWN_LEVEL
    try:
        return Level(level).name
    except ValueError:
        return UNKNOWN_LEVEL
