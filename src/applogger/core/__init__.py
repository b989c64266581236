"""Core domain: levels, entries, attribution and the Logger."""
