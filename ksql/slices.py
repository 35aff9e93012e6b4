"""Conversion of arbitrary sequences into plain lists."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ToInterfaceSlicer(Protocol):
    """Objects that know how to present themselves as a list of values."""

    def to_interface_slice(self) -> list[Any]:
        """Return the values held by this object as a list."""
        ...


def to_interface_slice(value: Any) -> list[Any]:
    """Return the items of ``value`` as a new list.

    Objects implementing :class:`ToInterfaceSlicer` convert themselves;
    anything else must be a sequence other than a string.
    """
    if isinstance(value, ToInterfaceSlicer):
        return value.to_interface_slice()
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise TypeError(
            "to_interface_slice only works with a sequence as argument, "
            f"got {type(value).__name__}"
        )
    return list(value)