"""Absent/empty value handling shared by every node."""
from __future__ import annotations

from typing import Any, Final


class _Missing:
    """Marker for a value whose key was not present in the payload."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo: dict) -> _Missing:
        return self


MISSING: Final = _Missing()


def is_missing(value: Any) -> bool:
    return value is MISSING


def is_empty(value: Any) -> bool:
    """Return True for absent, None, "" and empty list/tuple/dict.

    0, 0.0, False and whitespace-only strings are values, not emptiness.
    """
    if value is MISSING or value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False
