"""Replicate a template input filter across every item of a list payload."""
from __future__ import annotations

from typing import Any

from inputfilter.core.config import settings
from inputfilter.core.errors import configuration_error, invalid_count, invalid_data, raise_error
from inputfilter.core.logging import engine_logger

from .empty import MISSING
from .input import IS_EMPTY
from .input_filter import InputFilter
from .node import VALIDATE_ALL, ValidationNode, normalize_group

log = engine_logger()

COUNT_MISMATCH = "count_mismatch"


class CollectionInputFilter(ValidationNode):
    """Validate a list of payload items, each against its own clone of a template.

    Count policy:
    - ``count`` None: one item per payload element
    - ``count`` 0: nothing is validated, the collection is always valid
    - ``count`` N: exactly N clones; missing trailing items are validated as
      empty payloads, extra items are ignored, unless ``strict_count`` turns any
      length difference into a single ``count_mismatch`` failure
    """

    __slots__ = (
        "_template", "_count", "required", "strict_count",
        "_data", "_items", "_validation_group", "_messages", "_collection_messages",
    )

    def __init__(
        self,
        input_filter: InputFilter | None = None,
        *,
        count: int | None = None,
        required: bool = False,
        strict_count: bool | None = None,
    ):
        self._template = input_filter
        self._count: int | None = None
        self.required = required
        self.strict_count = settings.STRICT_COLLECTION_COUNT if strict_count is None else strict_count
        self._data: list[Any] = []
        self._items: list[InputFilter] = []
        self._validation_group: tuple[Any, ...] | None = None
        self._messages: dict[str, str] = {}
        self._collection_messages: dict[int, Any] = {}
        self.set_count(count)

    def __repr__(self) -> str:
        return f"CollectionInputFilter(count={self._count!r}, items={len(self._items)})"

    # -- configuration -------------------------------------------------------

    def set_input_filter(self, input_filter: InputFilter) -> CollectionInputFilter:
        self._template = input_filter
        return self

    def get_input_filter(self) -> InputFilter:
        if self._template is None:
            raise_error(configuration_error("Collection has no input filter template", origin="collection"))
        return self._template

    def set_count(self, count: int | None) -> CollectionInputFilter:
        if count is not None and (isinstance(count, bool) or not isinstance(count, int) or count < 0):
            raise_error(invalid_count(count, origin="collection"))
        self._count = count
        return self

    def get_count(self) -> int:
        return len(self._data) if self._count is None else self._count

    def set_validation_group(self, *group: Any) -> CollectionInputFilter:
        """Apply a validation group to every item; names are checked against the template now."""
        if normalize_group(group) is None:
            self._validation_group = None
        else:
            self.get_input_filter().clone().set_validation_group(*group)
            self._validation_group = group
        for item in self._items:
            item.set_validation_group(*(self._validation_group or (VALIDATE_ALL,)))
        return self

    # -- data ----------------------------------------------------------------

    def set_data(self, data: list[Any] | tuple[Any, ...]) -> CollectionInputFilter:
        if not isinstance(data, (list, tuple)):
            raise_error(invalid_data("list", data, origin="collection"))
        template = self.get_input_filter()
        self._data = list(data)
        self._messages, self._collection_messages = {}, {}

        self._items = []
        for index in range(self._count or len(self._data)):
            item = template.clone()
            if self._validation_group is not None:
                item.set_validation_group(*self._validation_group)
            item.populate(self._data[index] if index < len(self._data) else MISSING)
            self._items.append(item)
        return self

    def get_data(self) -> list[Any]:
        return list(self._data)

    def populate(self, value: Any) -> None:
        self.set_data(value if isinstance(value, (list, tuple)) else [])

    @property
    def items(self) -> list[InputFilter]:
        return list(self._items)

    # -- validation ----------------------------------------------------------

    def is_valid(self, context: Any = None) -> bool:
        self._messages, self._collection_messages = {}, {}

        if self._count == 0:
            return True

        if self.required and not self._data:
            self._messages = {IS_EMPTY: settings.COLLECTION_REQUIRED_MESSAGE}
            return False

        if self.strict_count and self._count is not None and len(self._data) != self._count:
            self._messages = {COUNT_MISMATCH: settings.COUNT_MISMATCH_MESSAGE}
            log.debug("collection_count_mismatch", expected=self._count, actual=len(self._data))
            return False

        valid = True
        for index, item in enumerate(self._items):
            if not item.is_valid(context):
                valid = False
                self._collection_messages[index] = item.get_messages()

        log.debug("collection_validated", items=len(self._items), invalid=list(self._collection_messages))
        return valid

    def get_messages(self) -> dict[Any, Any]:
        if self._messages:
            return dict(self._messages)
        return dict(self._collection_messages)

    @property
    def collection_messages(self) -> dict[int, Any]:
        return dict(self._collection_messages)

    # -- values --------------------------------------------------------------

    def get_values(self) -> list[dict[str, Any]]:
        return [item.get_values() for item in self._items]

    def get_raw_values(self) -> list[dict[str, Any]]:
        return [item.get_raw_values() for item in self._items]

    def get_unknown(self) -> dict[int, dict[str, Any]]:
        return {index: item.get_unknown() for index, item in enumerate(self._items) if item.has_unknown()}

    def has_unknown(self) -> bool:
        return bool(self.get_unknown())

    def export_value(self) -> list[dict[str, Any]]:
        return self.get_values()

    def export_raw_value(self) -> list[dict[str, Any]]:
        return self.get_raw_values()

    # -- cloning -------------------------------------------------------------

    def clone(self) -> CollectionInputFilter:
        copy = CollectionInputFilter(
            self._template.clone() if self._template is not None else None,
            count=self._count,
            required=self.required,
            strict_count=self.strict_count,
        )
        copy._validation_group = self._validation_group
        copy._data = list(self._data)
        copy._items = [item.clone() for item in self._items]
        return copy

