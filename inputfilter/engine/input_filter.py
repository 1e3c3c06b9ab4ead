"""Composite node: named children validated together against one payload."""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Iterator

from inputfilter.core.errors import configuration_error, invalid_data, raise_error, unknown_input
from inputfilter.core.logging import engine_logger

from .empty import MISSING
from .input import Input
from .node import ValidationNode, as_group_args, normalize_group

if TYPE_CHECKING:
    from inputfilter.factory import Factory

log = engine_logger()


class InputFilter(ValidationNode):
    """Ordered mapping of name -> node plus the payload being validated.

    Every active child is validated on each pass; one invalid child never
    stops its siblings from being evaluated. Keys of the payload that match
    no child are ignored for validity and reported by get_unknown().
    """

    __slots__ = ("_inputs", "_data", "_validation_group", "_valid", "_invalid", "_factory")

    def __init__(self, inputs: Mapping[str, ValidationNode | Mapping[str, Any]] | None = None, *, factory: Factory | None = None):
        self._factory = factory
        self._inputs: dict[str, ValidationNode] = {}
        self._data: dict[str, Any] | None = None
        self._validation_group: list[str] | None = None
        self._valid: dict[str, ValidationNode] = {}
        self._invalid: dict[str, ValidationNode] = {}
        for name, node in (inputs or {}).items():
            self.add(node, name)

    def __repr__(self) -> str:
        return f"InputFilter({list(self._inputs)})"

    # -- children ------------------------------------------------------------

    def get_factory(self) -> Factory:
        """Factory used to build children added as specification mappings; created on first use."""
        if self._factory is None:
            from inputfilter.factory import Factory

            self._factory = Factory()
        return self._factory

    def set_factory(self, factory: Factory) -> InputFilter:
        self._factory = factory
        return self

    def add(self, node: ValidationNode | Mapping[str, Any], name: str | None = None) -> InputFilter:
        """Add a child. Inputs default to their own name; adding an Input under
        a name already held by an Input merges the two. A mapping is built
        through the factory first (``{"name": "email", "validators": ["email"]}``).
        """
        if isinstance(node, Mapping):
            node = self.get_factory().create(node, name)
        if not isinstance(node, ValidationNode):
            raise_error(configuration_error(
                f"Expected an Input, InputFilter or CollectionInputFilter, got {type(node).__name__}",
                origin="input_filter",
            ))
        if name is None:
            name = getattr(node, "name", None)
        if not name:
            raise_error(configuration_error("Cannot add a child without a name", origin="input_filter"))
        if isinstance(node, Input) and node.name is None:
            node.name = name

        existing = self._inputs.get(name)
        if isinstance(existing, Input) and isinstance(node, Input):
            existing.merge(node)
            return self
        self._inputs[name] = node
        return self

    def get(self, name: str) -> ValidationNode:
        if name not in self._inputs:
            raise_error(unknown_input(name, origin="input_filter"))
        return self._inputs[name]

    def has(self, name: str) -> bool:
        return name in self._inputs

    def remove(self, name: str) -> InputFilter:
        self._inputs.pop(name, None)
        if self._validation_group and name in self._validation_group:
            self._validation_group.remove(name)
        return self

    @property
    def inputs(self) -> dict[str, ValidationNode]:
        return dict(self._inputs)

    def __contains__(self, name: object) -> bool: return name in self._inputs

    def __iter__(self) -> Iterator[str]: return iter(self._inputs)

    def __len__(self) -> int: return len(self._inputs)

    # -- data ----------------------------------------------------------------

    def set_data(self, data: Mapping[str, Any]) -> InputFilter:
        if not isinstance(data, Mapping):
            raise_error(invalid_data("mapping", data, origin="input_filter"))
        self._data = dict(data)
        self._valid, self._invalid = {}, {}
        for name, node in self._inputs.items():
            node.populate(self._data.get(name, MISSING))
        return self

    def get_data(self) -> dict[str, Any]:
        return dict(self._data or {})

    def populate(self, value: Any) -> None:
        self.set_data(value if isinstance(value, Mapping) else {})

    # -- validation ----------------------------------------------------------

    def set_validation_group(self, *group: Any) -> InputFilter:
        """Restrict the next passes to the named children.

        ``set_validation_group("a", "b")``, ``set_validation_group(["a", "b"])``
        and ``set_validation_group({"address": ["street"]})`` (nested group for a
        composite child) are accepted; VALIDATE_ALL clears the restriction.
        """
        names = normalize_group(group)
        if names is None:
            self._validation_group = None
            return self
        for name, nested in names.items():
            if name not in self._inputs:
                raise_error(unknown_input(name, origin="validation_group"))
            if nested is not None:
                self._inputs[name].set_validation_group(*as_group_args(nested))
        self._validation_group = list(names)
        return self

    def get_validation_group(self) -> list[str] | None:
        return list(self._validation_group) if self._validation_group is not None else None

    def _active(self) -> list[str]:
        return list(self._inputs) if self._validation_group is None else list(self._validation_group)

    def is_valid(self, context: Any = None) -> bool:
        if self._data is None:
            raise_error(configuration_error("No data present to validate; call set_data() first",
                origin="input_filter"))

        self._valid, self._invalid = {}, {}
        for name in self._active():
            node = self._inputs[name]
            if node.validate_as_child(context, self._data):
                self._valid[name] = node
            else:
                self._invalid[name] = node

        log.debug("input_filter_validated", valid=list(self._valid), invalid=list(self._invalid),
            unknown=list(self.get_unknown()))
        return not self._invalid

    def get_valid_input(self) -> dict[str, ValidationNode]:
        return dict(self._valid)

    def get_invalid_input(self) -> dict[str, ValidationNode]:
        return dict(self._invalid)

    def get_messages(self) -> dict[str, Any]:
        return {name: node.get_messages() for name, node in self._invalid.items()}

    # -- values --------------------------------------------------------------

    def get_values(self) -> dict[str, Any]:
        return {name: self._inputs[name].export_value() for name in self._active()}

    def get_raw_values(self) -> dict[str, Any]:
        return {name: self._inputs[name].export_raw_value() for name in self._active()}

    def get_value(self, name: str) -> Any:
        return self.get(name).export_value()

    def get_raw_value(self, name: str) -> Any:
        return self.get(name).export_raw_value()

    def get_unknown(self) -> dict[str, Any]:
        return {k: v for k, v in (self._data or {}).items() if k not in self._inputs}

    def has_unknown(self) -> bool:
        return bool(self.get_unknown())

    def export_value(self) -> dict[str, Any]:
        return self.get_values()

    def export_raw_value(self) -> dict[str, Any]:
        return self.get_raw_values()

    # -- cloning -------------------------------------------------------------

    def clone(self) -> InputFilter:
        copy = InputFilter(factory=self._factory)
        for name, node in self._inputs.items():
            copy._inputs[name] = node.clone()
        copy._data = dict(self._data) if self._data is not None else None
        copy._validation_group = self.get_validation_group()
        return copy
