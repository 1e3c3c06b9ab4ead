"""Leaf node: one named value, one filter chain, one validator chain."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

from inputfilter.core.config import settings
from inputfilter.validation.validators import AtomicValidator

from .empty import MISSING, is_empty
from .filter_chain import FilterChain
from .node import ValidationNode
from .validator_chain import ValidatorChain

IS_EMPTY = "is_empty"
ERROR_MESSAGE = "error_message"


class Input(ValidationNode):
    """Filter then validate a single value.

    Emptiness policy, in order:
    - absent with a fallback: valid, the fallback becomes the value
    - absent and required: invalid with the ``is_empty`` message
    - absent and optional: valid, validators never run
    - empty with ``continue_if_empty``: validators run on the empty value
    - empty and optional, or ``allow_empty``: valid
    - empty and required with a fallback: valid, the fallback becomes the value
    - empty and required: invalid with the ``is_empty`` message

    Validators always see the filtered value.
    """

    __slots__ = (
        "name", "required", "allow_empty", "continue_if_empty", "error_message",
        "fallback_value", "filter_chain", "validator_chain",
        "_raw_value", "_value", "_stale", "_use_fallback", "_messages",
    )

    def __init__(
        self,
        name: str | None = None,
        *,
        required: bool = True,
        allow_empty: bool = False,
        continue_if_empty: bool = False,
        fallback_value: Any = MISSING,
        error_message: str | None = None,
        filters: list[Callable[[Any], Any]] | FilterChain | None = None,
        validators: list[AtomicValidator | Callable[..., Any]] | ValidatorChain | None = None,
    ):
        self.name = name
        self.required = required
        self.allow_empty = allow_empty
        self.continue_if_empty = continue_if_empty
        self.fallback_value = fallback_value
        self.error_message = error_message
        self.filter_chain = filters if isinstance(filters, FilterChain) else FilterChain(filters)
        self.validator_chain = validators if isinstance(validators, ValidatorChain) else ValidatorChain(validators)
        self._raw_value: Any = MISSING
        self._value: Any = None
        self._stale = True
        self._use_fallback = False
        self._messages: dict[str, str] = {}

    def __repr__(self) -> str:
        return f"Input(name={self.name!r}, required={self.required})"

    # -- value ---------------------------------------------------------------

    def set_value(self, value: Any) -> Input:
        self._raw_value = value
        self._use_fallback = False
        self._stale = True
        return self

    def reset_value(self) -> Input:
        return self.set_value(MISSING)

    def has_value(self) -> bool:
        return self._raw_value is not MISSING

    def has_fallback(self) -> bool:
        return self.fallback_value is not MISSING

    def _effective_raw(self) -> Any:
        return self.fallback_value if self._use_fallback else self._raw_value

    def get_raw_value(self) -> Any:
        raw = self._effective_raw()
        return None if raw is MISSING else raw

    def get_value(self) -> Any:
        if self._stale:
            raw = self._effective_raw()
            self._value = None if raw is MISSING else self.filter_chain.filter(raw)
            self._stale = False
        return self._value

    def _apply_fallback(self) -> bool:
        self._use_fallback = True
        self._stale = True
        self._messages = {}
        return True

    # -- validation ----------------------------------------------------------

    def is_valid(self, context: Any = None) -> bool:
        self._messages = {}
        if self._use_fallback:
            self._use_fallback = False
            self._stale = True

        if not self.has_value():
            if self.has_fallback():
                return self._apply_fallback()
            if self.required:
                self._messages = {IS_EMPTY: settings.REQUIRED_MESSAGE}
                return False
            return True

        value = self.get_value()
        if is_empty(value) and not self.continue_if_empty:
            if not self.required or self.allow_empty:
                return True
            if self.has_fallback():
                return self._apply_fallback()
            self._messages = {IS_EMPTY: settings.REQUIRED_MESSAGE}
            return False

        if self.validator_chain.is_valid(value, context):
            return True
        if self.has_fallback():
            return self._apply_fallback()
        self._messages = self.validator_chain.get_messages()
        return False

    def get_messages(self) -> dict[str, str]:
        if self._messages and self.error_message is not None:
            return {ERROR_MESSAGE: self.error_message}
        return dict(self._messages)

    # -- tree protocol -------------------------------------------------------

    def populate(self, value: Any) -> None:
        self.set_value(value)

    def export_value(self) -> Any:
        return self.get_value()

    def export_raw_value(self) -> Any:
        return self.get_raw_value()

    def validate_as_child(self, context: Any, owner_data: Mapping) -> bool:
        return self.is_valid(owner_data if context is None else context)

    def merge(self, other: Input) -> Input:
        """Take over another input's name, policy and value; append its chains to ours."""
        self.name = other.name
        self.required = other.required
        self.allow_empty = other.allow_empty
        self.continue_if_empty = other.continue_if_empty
        self.error_message = other.error_message
        if other.has_fallback():
            self.fallback_value = other.fallback_value
        if other.has_value():
            self.set_value(other._raw_value)
        self.filter_chain.merge(other.filter_chain)
        self.validator_chain.merge(other.validator_chain)
        return self

    def clone(self) -> Input:
        copy = Input(
            self.name,
            required=self.required,
            allow_empty=self.allow_empty,
            continue_if_empty=self.continue_if_empty,
            fallback_value=self.fallback_value,
            error_message=self.error_message,
            filters=self.filter_chain.copy(),
            validators=self.validator_chain.copy(),
        )
        copy.set_value(self._raw_value)
        return copy
