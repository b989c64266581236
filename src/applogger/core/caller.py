"""Caller attribution by stack inspection.

The Logger reports the component (module path, plus the enclosing class for
methods) and the operation (function name) of the code that invoked a public
logging method. Resolution walks a fixed number of frames up the stack, so
the frame depth between the public entry point and the provider matters:

    user code -> Logger.log / Logger.info / ... -> Logger._emit
        -> AttributionProvider.caller -> identify_caller

``Logger._emit`` asks for ``skip = 1 + stacklevel``. Adding or removing a
layer between user code and ``_emit`` shifts attribution and must be paired
with a matching change to that offset.
"""

import sys

from applogger.core.models import UNKNOWN_CALLER

_UNKNOWN = (UNKNOWN_CALLER, UNKNOWN_CALLER)


def split_symbol(symbol: str) -> tuple[str, str]:
    """Split a dotted symbol name at its last separator.

    Examples:
        "app.handlers.Server.handle" -> ("app.handlers.Server", "handle")
        "main" -> ("unknown", "main")
    """
    component, sep, operation = symbol.rpartition(".")
    if not sep:
        return UNKNOWN_CALLER, symbol or UNKNOWN_CALLER
    return component or UNKNOWN_CALLER, operation or UNKNOWN_CALLER


def identify_caller(skip: int = 0) -> tuple[str, str]:
    """Return (component, operation) for a frame on the current stack.

    Args:
        skip: Frames above the function calling identify_caller.
              0 is that function itself.

    Returns:
        The split symbol name of the frame, or ("unknown", "unknown") when
        frame introspection is unavailable or the stack is not that deep.
    """
    getframe = getattr(sys, "_getframe", None)
    if getframe is None or skip < 0:
        return _UNKNOWN
    try:
        frame = getframe(skip + 1)
    except ValueError:
        return _UNKNOWN

    module = frame.f_globals.get("__name__") or UNKNOWN_CALLER
    code = frame.f_code
    qualname = getattr(code, "co_qualname", code.co_name)
    return split_symbol(f"{module}.{qualname}")


class StackAttribution:
    """Default AttributionProvider backed by frame introspection."""

    def caller(self, skip: int) -> tuple[str, str]:
        # One extra frame for this method
        return identify_caller(skip + 1)


class NullAttribution:
    """AttributionProvider that never inspects the stack."""

    def caller(self, skip: int) -> tuple[str, str]:
        return _UNKNOWN
