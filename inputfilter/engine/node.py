"""Shared capability interface of every node in an input filter tree.

Inputs, input filters and collections are interchangeable as children: an
owning InputFilter only talks to them through these methods and never
inspects their concrete type.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Final

from inputfilter.core.errors import configuration_error, raise_error


class _ValidateAll:
    __slots__ = ()

    def __repr__(self) -> str:
        return "VALIDATE_ALL"


VALIDATE_ALL: Final = _ValidateAll()


class ValidationNode(ABC):
    """A named position in the tree that can receive a value and judge it."""

    __slots__ = ()

    @abstractmethod
    def populate(self, value: Any) -> None:
        """Receive ``payload[name]`` from the owning filter (MISSING when absent)."""

    @abstractmethod
    def is_valid(self, context: Any = None) -> bool:
        """Validate the current value. Failures are reported through get_messages()."""

    @abstractmethod
    def get_messages(self) -> dict:
        """Messages of the last validation pass; empty when valid."""

    @abstractmethod
    def export_value(self) -> Any:
        """Filtered value as seen by the owning filter's get_values()."""

    @abstractmethod
    def export_raw_value(self) -> Any:
        """Unfiltered value as seen by the owning filter's get_raw_values()."""

    @abstractmethod
    def clone(self) -> ValidationNode:
        """Structural deep copy sharing only stateless filters/validators."""

    def validate_as_child(self, context: Any, owner_data: Mapping) -> bool:
        """Validate on behalf of an owning input filter.

        Composite nodes forward the caller's context untouched so that, with
        no explicit context, each composite falls back to its own data.
        """
        return self.is_valid(context)

    def set_validation_group(self, *group: Any) -> ValidationNode:
        raise_error(configuration_error(
            f"{type(self).__name__} does not accept a nested validation group",
            origin="validation_group",
        ))


def normalize_group(group: tuple[Any, ...]) -> dict[str, Any] | None:
    """Flatten ``set_validation_group`` arguments into {name: nested group or None}.

    Accepts names, iterables of names and mappings of name -> nested group.
    Returns None for VALIDATE_ALL.
    """
    if len(group) == 1 and group[0] is VALIDATE_ALL:
        return None
    names: dict[str, Any] = {}
    for item in group:
        if isinstance(item, Mapping):
            names.update(item)
        elif isinstance(item, (list, tuple, set, frozenset)):
            names.update((name, None) for name in item)
        else:
            names[item] = None
    return names


def as_group_args(nested: Any) -> tuple[Any, ...]:
    if isinstance(nested, (list, tuple)):
        return tuple(nested)
    return (nested,)
