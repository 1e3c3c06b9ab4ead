"""Ordered value-transform pipeline."""
from __future__ import annotations

from dataclasses import dataclass
from itertools import count
from typing import Any, Callable, Iterator

Filter = Callable[[Any], Any]


@dataclass(frozen=True, slots=True)
class FilterEntry:
    filter: Filter
    priority: int
    sequence: int


class FilterChain:
    """Apply every attached filter, highest priority first.

    Equal priorities keep insertion order, so a chain built without explicit
    priorities runs filters exactly in the order they were attached.
    """

    DEFAULT_PRIORITY = 1000

    __slots__ = ("_entries", "_sequence")

    def __init__(self, filters: list[Filter] | None = None):
        self._entries: list[FilterEntry] = []
        self._sequence = count()
        for f in filters or ():
            self.attach(f)

    def attach(self, filter: Filter, priority: int = DEFAULT_PRIORITY) -> FilterChain:
        if not callable(filter):
            raise TypeError(f"Filter must be callable, got {type(filter).__name__}")
        self._entries.append(FilterEntry(filter, priority, next(self._sequence)))
        self._entries.sort(key=lambda e: (-e.priority, e.sequence))
        return self

    def prepend(self, filter: Filter) -> FilterChain:
        """Attach a filter that runs before every filter currently in the chain."""
        top = self._entries[0].priority if self._entries else self.DEFAULT_PRIORITY
        return self.attach(filter, priority=top + 1)

    def merge(self, other: FilterChain) -> FilterChain:
        for entry in other._entries:
            self.attach(entry.filter, entry.priority)
        return self

    def filter(self, value: Any) -> Any:
        for entry in self._entries:
            value = entry.filter(value)
        return value

    def copy(self) -> FilterChain:
        """New chain sharing the (stateless) filters."""
        return FilterChain().merge(self)

    @property
    def filters(self) -> list[Filter]:
        return [e.filter for e in self._entries]

    def __call__(self, value: Any) -> Any: return self.filter(value)

    def __iter__(self) -> Iterator[Filter]: return iter(self.filters)

    def __len__(self) -> int: return len(self._entries)
