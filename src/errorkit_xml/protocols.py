"""Capability protocol for wire wrappers that hand back a domain value.

Serialization layers wrap domain objects in XML-aware adapters on the way
out and need the domain object back on the way in.  A wrapper advertises
this by implementing :class:`Unwrappable`; :func:`unwrap_value` is the
generic converter side.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

__all__ = ["Unwrappable", "unwrap_value"]


@runtime_checkable
class Unwrappable(Protocol):
    """A wrapper that can return the value it wraps."""

    def unwrap(self, declared_type: type) -> Any:
        """Return the wrapped value for a property declared as *declared_type*."""
        ...


def unwrap_value(value: Any, declared_type: type) -> Any:
    """Return ``value.unwrap(declared_type)`` for wrappers, else *value*."""
    if isinstance(value, Unwrappable):
        return value.unwrap(declared_type)
    return value
