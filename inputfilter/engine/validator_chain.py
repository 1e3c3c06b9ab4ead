"""Ordered pass/fail pipeline with break-on-failure short-circuit."""
from __future__ import annotations

from dataclasses import dataclass
from itertools import count
from typing import Any, Callable, Iterator

from inputfilter.validation.validators import AtomicValidator, CustomValidator


@dataclass(frozen=True, slots=True)
class ValidatorEntry:
    validator: AtomicValidator
    break_on_failure: bool
    priority: int
    sequence: int


class ValidatorChain:
    """Run validators in priority order, collecting messages of every failure.

    A failing entry attached with ``break_on_failure`` stops the chain; later
    entries are not evaluated for that call. Messages map the failing
    validator's constraint name to its message and are reset on every call.
    A key already taken by an earlier failure in the same call gets the
    entry's sequence number appended (``"<lambda>#1"``).
    """

    DEFAULT_PRIORITY = 1

    __slots__ = ("_entries", "_sequence", "_messages")

    def __init__(self, validators: list[AtomicValidator | Callable[..., Any]] | None = None):
        self._entries: list[ValidatorEntry] = []
        self._sequence = count()
        self._messages: dict[str, str] = {}
        for v in validators or ():
            self.attach(v)

    @staticmethod
    def _coerce(validator: AtomicValidator | Callable[..., Any]) -> AtomicValidator:
        if isinstance(validator, AtomicValidator):
            return validator
        if callable(validator):
            return CustomValidator.from_callable(validator)
        raise TypeError(f"Validator must be an AtomicValidator or callable, got {type(validator).__name__}")

    def attach(
        self,
        validator: AtomicValidator | Callable[..., Any],
        break_on_failure: bool = False,
        priority: int = DEFAULT_PRIORITY,
    ) -> ValidatorChain:
        self._entries.append(ValidatorEntry(self._coerce(validator), break_on_failure, priority, next(self._sequence)))
        self._entries.sort(key=lambda e: (-e.priority, e.sequence))
        return self

    def prepend(self, validator: AtomicValidator | Callable[..., Any], break_on_failure: bool = False) -> ValidatorChain:
        """Attach a validator that runs before every validator currently in the chain."""
        top = self._entries[0].priority if self._entries else self.DEFAULT_PRIORITY
        return self.attach(validator, break_on_failure, priority=top + 1)

    def merge(self, other: ValidatorChain) -> ValidatorChain:
        for entry in other._entries:
            self.attach(entry.validator, entry.break_on_failure, entry.priority)
        return self

    def is_valid(self, value: Any, context: Any = None) -> bool:
        self._messages = {}
        valid = True
        for entry in self._entries:
            result = entry.validator.validate(value, context)
            if result.is_valid:
                continue
            valid = False
            key = result.constraint or entry.validator.constraint_name
            if key in self._messages:
                key = f"{key}#{entry.sequence}"
            self._messages[key] = result.error_message or "The input is not valid"
            if entry.break_on_failure:
                break
        return valid

    def get_messages(self) -> dict[str, str]:
        return dict(self._messages)

    def copy(self) -> ValidatorChain:
        """New chain sharing the (stateless) validators, with empty messages."""
        return ValidatorChain().merge(self)

    @property
    def validators(self) -> list[ValidatorEntry]:
        return list(self._entries)

    def __iter__(self) -> Iterator[ValidatorEntry]: return iter(self.validators)

    def __len__(self) -> int: return len(self._entries)
