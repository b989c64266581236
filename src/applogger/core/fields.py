"""Merging of logger default fields with per-call context fields."""

from collections.abc import Mapping
from typing import Any


def resolve_attributes(
    defaults: Mapping[str, Any] | None,
    context_fields: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Merge default fields with context fields into a new dict.

    Context values win on key collision. Either side may be None.
    Neither input is modified. Keys keep insertion order: defaults first,
    then keys that only the context supplies.

    Args:
        defaults: Fields attached to the logger.
        context_fields: Fields carried by the call's context.

    Returns:
        The merged attribute mapping.
    """
    merged = dict(defaults or {})
    if context_fields:
        merged.update(context_fields)
    return merged
