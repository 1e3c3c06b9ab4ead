"""Declarative construction of input filter trees.

Specifications are plain mappings (e.g. loaded from JSON/YAML config) parsed
into pydantic models, then turned into engine nodes. Filter and validator
names are resolved through registries; the engine itself never sees names.

Usage:
    factory = Factory()
    login = factory.create_input_filter({
        "inputs": {
            "username": {
                "filters": ["trim"],
                "validators": [{"name": "string_length", "options": {"min_length": 3}}],
            },
            "remember": {"required": False, "filters": ["to_bool"]},
        },
    })
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Callable, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from inputfilter.core.errors import (
    AppError,
    Result,
    invalid_specification,
    raise_error,
    try_result,
    unknown_plugin,
)
from inputfilter.core.logging import factory_logger
from inputfilter.engine import (
    MISSING,
    CollectionInputFilter,
    FilterChain,
    Input,
    InputFilter,
    ValidationNode,
    ValidatorChain,
)
from inputfilter.validation import filters as f
from inputfilter.validation import validators as v

T = TypeVar("T")

log = factory_logger()


# ============================================================================
# Specification Schemas
# ============================================================================

class SpecSchema(BaseModel):
    """Base for specification models: unknown keys are configuration mistakes."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, arbitrary_types_allowed=True)


def _named(item: Any) -> Any:
    return {"name": item} if isinstance(item, str) else item


class FilterSpec(SpecSchema):
    name: str
    options: dict[str, Any] = Field(default_factory=dict)
    priority: int = FilterChain.DEFAULT_PRIORITY


class ValidatorSpec(SpecSchema):
    name: str
    options: dict[str, Any] = Field(default_factory=dict)
    break_chain_on_failure: bool = False
    priority: int = ValidatorChain.DEFAULT_PRIORITY


class InputSpec(SpecSchema):
    type: Literal["input"] = "input"
    name: str | None = None
    required: bool = True
    allow_empty: bool = False
    continue_if_empty: bool = False
    fallback_value: Any = None
    error_message: str | None = None
    filters: list[Union[FilterSpec, Callable[[Any], Any]]] = Field(default_factory=list)
    validators: list[Union[ValidatorSpec, Callable[..., Any]]] = Field(default_factory=list)

    @field_validator("filters", "validators", mode="before")
    @classmethod
    def _expand_names(cls, items: Any) -> Any:
        if isinstance(items, (list, tuple)):
            return [_named(item) for item in items]
        return items


def _infer_type(spec: Any) -> Any:
    """Fill in ``type`` for mapping specs that leave it implicit."""
    if not isinstance(spec, Mapping) or "type" in spec:
        return spec
    if "input_filter" in spec:
        return {**spec, "type": "collection"}
    if "inputs" in spec:
        return {**spec, "type": "input_filter"}
    return {**spec, "type": "input"}


class InputFilterSpec(SpecSchema):
    type: Literal["input_filter"] = "input_filter"
    inputs: dict[str, NodeSpec] = Field(default_factory=dict)

    @field_validator("inputs", mode="before")
    @classmethod
    def _infer_child_types(cls, inputs: Any) -> Any:
        if isinstance(inputs, Mapping):
            return {name: _infer_type(spec) for name, spec in inputs.items()}
        return inputs


class CollectionSpec(SpecSchema):
    type: Literal["collection"] = "collection"
    input_filter: InputFilterSpec
    count: int | None = Field(default=None, ge=0)
    required: bool = False
    strict_count: bool | None = None


NodeSpec = Annotated[Union[InputSpec, InputFilterSpec, CollectionSpec], Field(discriminator="type")]

InputFilterSpec.model_rebuild()
CollectionSpec.model_rebuild()


# ============================================================================
# Plugin Registries
# ============================================================================

class PluginRegistry(Generic[T]):
    """Name -> constructor mapping; ``create(name, options)`` builds a fresh plugin."""

    kind = "plugin"

    __slots__ = ("_factories",)

    def __init__(self, factories: Mapping[str, Callable[..., T]] | None = None):
        self._factories: dict[str, Callable[..., T]] = dict(self.defaults())
        self._factories.update(factories or {})

    def defaults(self) -> dict[str, Callable[..., T]]:
        return {}

    def register(self, name: str, factory: Callable[..., T]) -> PluginRegistry[T]:
        self._factories[name] = factory
        return self

    def has(self, name: str) -> bool:
        return name in self._factories

    def create(self, name: str, options: Mapping[str, Any] | None = None) -> T:
        if name not in self._factories:
            raise_error(unknown_plugin(self.kind, name, origin="factory"))
        try:
            return self._factories[name](**(options or {}))
        except TypeError as e:
            raise_error(invalid_specification(f"bad options for {self.kind} '{name}': {e}",
                origin="factory", options=dict(options or {})))

    def __contains__(self, name: object) -> bool: return name in self._factories


class FilterRegistry(PluginRegistry[Callable[[Any], Any]]):
    kind = "filter"

    def defaults(self) -> dict[str, Callable[..., Callable[[Any], Any]]]:
        return {
            "trim": f.StringTrim,
            "lower": lambda: f.lower,
            "upper": lambda: f.upper,
            "title": lambda: f.title,
            "normalize_whitespace": lambda: f.normalize_whitespace,
            "strip_control_chars": lambda: f.strip_control_chars,
            "to_null": f.ToNull,
            "to_int": f.StringToInt,
            "to_float": f.StringToFloat,
            "to_decimal": f.StringToDecimal,
            "to_bool": f.StringToBool,
            "to_datetime": f.ISO8601ToDateTime,
            "to_uuid": f.StringToUUID,
        }


class ValidatorRegistry(PluginRegistry[v.AtomicValidator]):
    kind = "validator"

    def defaults(self) -> dict[str, Callable[..., v.AtomicValidator]]:
        return {
            "string_length": v.StringLength,
            "non_empty": v.NonEmpty,
            "regex": v.RegexPattern,
            "one_of": lambda haystack=(), case_sensitive=True: v.OneOf(*haystack, case_sensitive=case_sensitive),
            "numeric_range": v.NumericRange,
            "positive": v.Positive,
            "email": v.EmailValidator,
            "uuid": v.UUIDValidator,
            "datetime": v.DateTimeValidator,
            "list_length": v.ListLength,
            "identical": v.Identical,
        }


# ============================================================================
# Factory
# ============================================================================

def _parse(model: type[SpecSchema], spec: Any) -> Any:
    if isinstance(spec, model):
        return spec
    try:
        return model.model_validate(spec)
    except ValidationError as e:
        raise_error(invalid_specification(
            f"{e.error_count()} problem(s) in {model.__name__}",
            origin="factory",
            errors=[{"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]} for err in e.errors()],
        ))


class Factory:
    """Build Inputs, InputFilters and CollectionInputFilters from specifications."""

    __slots__ = ("filters", "validators")

    def __init__(self, filters: FilterRegistry | None = None, validators: ValidatorRegistry | None = None):
        self.filters = filters or FilterRegistry()
        self.validators = validators or ValidatorRegistry()

    def create_input(self, spec: Mapping[str, Any] | InputSpec) -> Input:
        parsed: InputSpec = _parse(InputSpec, spec)
        return self._build_input(parsed)

    def create_input_filter(self, spec: Mapping[str, Any] | InputFilterSpec | CollectionSpec) -> InputFilter | CollectionInputFilter:
        is_collection = isinstance(spec, CollectionSpec) or (
            isinstance(spec, Mapping) and (spec.get("type") == "collection" or "input_filter" in spec))
        node = self._build(_parse(CollectionSpec if is_collection else InputFilterSpec, spec))
        log.debug("factory_built", kind=type(node).__name__)
        return node

    def create(self, spec: Mapping[str, Any] | InputSpec | InputFilterSpec | CollectionSpec,
               name: str | None = None) -> ValidationNode:
        """Build whichever node ``spec`` describes; ``type`` is inferred when omitted."""
        if isinstance(spec, Mapping):
            spec = _infer_type(spec)
            kind = spec["type"]
        else:
            kind = getattr(spec, "type", None)
        model = {"input_filter": InputFilterSpec, "collection": CollectionSpec}.get(kind, InputSpec)
        return self._build(_parse(model, spec), name)

    def try_create_input_filter(self, spec: Mapping[str, Any]) -> Result[InputFilter | CollectionInputFilter, AppError]:
        """Result-returning variant of create_input_filter."""
        return try_result(lambda: self.create_input_filter(spec), origin="factory")

    def _build(self, spec: InputSpec | InputFilterSpec | CollectionSpec, name: str | None = None) -> ValidationNode:
        if isinstance(spec, InputSpec):
            return self._build_input(spec, name)
        if isinstance(spec, CollectionSpec):
            return CollectionInputFilter(
                self._build(spec.input_filter),
                count=spec.count,
                required=spec.required,
                strict_count=spec.strict_count,
            )
        input_filter = InputFilter(factory=self)
        for child_name, child_spec in spec.inputs.items():
            input_filter.add(self._build(child_spec, child_name), child_name)
        return input_filter

    def _build_input(self, spec: InputSpec, name: str | None = None) -> Input:
        filter_chain = FilterChain()
        for item in spec.filters:
            if isinstance(item, FilterSpec):
                filter_chain.attach(self.filters.create(item.name, item.options), item.priority)
            else:
                filter_chain.attach(item)

        validator_chain = ValidatorChain()
        for item in spec.validators:
            if isinstance(item, ValidatorSpec):
                validator_chain.attach(
                    self.validators.create(item.name, item.options),
                    break_on_failure=item.break_chain_on_failure,
                    priority=item.priority,
                )
            else:
                validator_chain.attach(item)

        return Input(
            spec.name or name,
            required=spec.required,
            allow_empty=spec.allow_empty,
            continue_if_empty=spec.continue_if_empty,
            fallback_value=spec.fallback_value if "fallback_value" in spec.model_fields_set else MISSING,
            error_message=spec.error_message,
            filters=filter_chain,
            validators=validator_chain,
        )


class InputFilterRegistry:
    """Named input filter specifications, built on demand.

    Every ``get`` returns a freshly built tree, so callers never share
    validation state.
    """

    __slots__ = ("_specs", "factory")

    def __init__(self, specs: Mapping[str, Any] | None = None, factory: Factory | None = None):
        self._specs: dict[str, Any] = dict(specs or {})
        self.factory = factory or Factory()

    @classmethod
    def from_config(cls, config: Mapping[str, Any], factory: Factory | None = None) -> InputFilterRegistry:
        """Read the ``input_filter_specs`` section of an application config mapping."""
        return cls(config.get("input_filter_specs") or {}, factory)

    def register(self, name: str, spec: Mapping[str, Any]) -> InputFilterRegistry:
        self._specs[name] = spec
        return self

    def has(self, name: str) -> bool:
        return name in self._specs

    def get(self, name: str) -> InputFilter | CollectionInputFilter:
        if name not in self._specs:
            raise_error(unknown_plugin("input filter", name, origin="input_filter_registry"))
        return self.factory.create_input_filter(self._specs[name])

    def __contains__(self, name: object) -> bool: return name in self._specs
