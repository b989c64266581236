"""Port interfaces for the logger's pluggable capabilities.

These protocols define the contracts a Logger relies on for stack
inspection and process termination, so both can be swapped in tests or on
interpreters without frame introspection.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class AttributionProvider(Protocol):
    """Port for resolving where a log call came from.

    Examples: StackAttribution, NullAttribution.
    """

    def caller(self, skip: int) -> tuple[str, str]:
        """Return the (component, operation) of a calling frame.

        Args:
            skip: Number of frames above the provider's caller.
                  0 is the function that called ``caller`` itself.

        Returns:
            Tuple of component and operation names, ("unknown", "unknown")
            if the frame cannot be resolved.
        """
        ...


@runtime_checkable
class Terminator(Protocol):
    """Port for ending the process after a FATAL entry is emitted."""

    def __call__(self, status: int) -> None:
        """Terminate with the given exit status."""
        ...
