"""Ambient per-call field-set carried by the execution context.

A context holds zero or one field-set, stored under the well-known marker
``FIELDS_KEY``. The marker is the name of a ``contextvars.ContextVar``, so a
field-set set inside a request handler follows the code through threads
started with ``contextvars.copy_context().run`` and through awaited
coroutines. Plain mappings can carry a field-set under the same key.
"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import Context, ContextVar, copy_context
from typing import Any

FIELDS_KEY = "applogger_fields"

# Anything a log call accepts as its context argument
LogContext = Context | Mapping[str, Any] | None

_log_fields: ContextVar[Mapping[str, Any] | None] = ContextVar(FIELDS_KEY, default=None)


def fields_from_context(ctx: LogContext) -> dict[str, Any]:
    """Extract the field-set attached to a context.

    Args:
        ctx: A ``contextvars.Context``, a mapping carrying ``FIELDS_KEY``,
            or None.

    Returns:
        A copy of the attached fields. Empty when the context is None,
        has no field-set, or is of an unsupported kind.
    """
    if ctx is None:
        return {}
    if isinstance(ctx, Context):
        fields = ctx.get(_log_fields)
    elif isinstance(ctx, Mapping):
        fields = ctx.get(FIELDS_KEY)
    else:
        return {}
    if not isinstance(fields, Mapping):
        return {}
    return dict(fields)


def context_with_fields(
    fields: Mapping[str, Any], ctx: Context | None = None
) -> Context:
    """Return a copy of a context with a field-set attached.

    The copy carries exactly ``fields``; any field-set already on ``ctx``
    is replaced in the copy and left untouched in ``ctx``.

    Args:
        fields: Fields to attach.
        ctx: Context to copy. Defaults to the current context.
    """
    new_ctx = ctx.copy() if ctx is not None else copy_context()
    new_ctx.run(_log_fields.set, dict(fields))
    return new_ctx


def current_context() -> Context:
    """Snapshot the running context, including its field-set."""
    return copy_context()


def get_log_context() -> dict[str, Any]:
    """Return a copy of the field-set of the running context."""
    fields = _log_fields.get()
    return dict(fields) if fields else {}


def set_log_context(**fields: Any) -> None:
    """Replace the field-set of the running context."""
    _log_fields.set(dict(fields))


def update_log_context(**fields: Any) -> None:
    """Add fields to the running context, overwriting existing keys."""
    _log_fields.set({**get_log_context(), **fields})


def clear_log_context() -> None:
    """Remove the field-set from the running context."""
    _log_fields.set(None)


@contextmanager
def log_context(**fields: Any) -> Iterator[dict[str, Any]]:
    """Add fields to the running context for the duration of a block.

    The previous field-set is restored on exit.

    Yields:
        The field-set in effect inside the block.
    """
    merged = {**get_log_context(), **fields}
    token = _log_fields.set(merged)
    try:
        yield dict(merged)
    finally:
        _log_fields.reset(token)
