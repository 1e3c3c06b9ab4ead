import pytest

from inputfilter import (
    CollectionInputFilter,
    ConfigurationError,
    Factory,
    FilterRegistry,
    Input,
    InputFilter,
    InputFilterRegistry,
    ValidatorRegistry,
)
from inputfilter.core.errors import ErrorCode
from inputfilter.validation import CustomValidator, RegexPattern, StringLength


@pytest.fixture
def factory() -> Factory:
    return Factory()


def test_builds_input_filter_from_mapping(factory):
    form = factory.create_input_filter({
        "inputs": {
            "username": {
                "filters": ["trim"],
                "validators": [{"name": "string_length", "options": {"min_length": 3}}],
            },
            "remember": {"required": False, "filters": ["to_bool"]},
        },
    })

    assert isinstance(form, InputFilter)
    form.set_data({"username": "  ab ", "remember": "yes"})
    assert form.is_valid() is False
    assert form.get_messages() == {"username": {"min_length[3]": "String length 2 is less than minimum 3"}}
    assert form.get_value("remember") is True


def test_input_flags_are_applied(factory):
    field = factory.create_input({
        "name": "nickname",
        "required": False,
        "allow_empty": True,
        "continue_if_empty": True,
        "error_message": "Bad nickname",
    })

    assert isinstance(field, Input)
    assert field.name == "nickname"
    assert (field.required, field.allow_empty, field.continue_if_empty) == (False, True, True)
    assert field.error_message == "Bad nickname"
    assert field.has_fallback() is False


def test_explicit_none_fallback_is_kept(factory):
    field = factory.create_input({"name": "note", "fallback_value": None})
    assert field.has_fallback() is True
    assert field.is_valid() is True


def test_priorities_and_break_flags_are_applied(factory):
    field = factory.create_input({
        "name": "code",
        "filters": [{"name": "upper"}, {"name": "trim", "priority": 5000}],
        "validators": [
            {"name": "string_length", "options": {"max_length": 3}, "break_chain_on_failure": True},
            {"name": "regex", "options": {"pattern": r"^[A-Z]+$"}, "priority": 10},
        ],
    })

    field.set_value(" ab ")
    assert field.get_value() == "AB"
    entries = list(field.validator_chain)
    assert isinstance(entries[0].validator, RegexPattern)
    assert entries[0].priority == 10
    assert entries[1].break_on_failure is True


def test_nested_and_collection_types_are_inferred(factory):
    form = factory.create_input_filter({
        "inputs": {
            "address": {"inputs": {"city": {}}},
            "tags": {"input_filter": {"inputs": {"label": {}}}, "count": 2},
        },
    })

    assert isinstance(form.get("address"), InputFilter)
    tags = form.get("tags")
    assert isinstance(tags, CollectionInputFilter)
    assert tags.get_count() == 2


def test_top_level_collection_spec(factory):
    collection = factory.create_input_filter({
        "type": "collection",
        "input_filter": {"inputs": {"name": {"validators": ["non_empty"]}}},
        "required": True,
    })

    assert isinstance(collection, CollectionInputFilter)
    collection.set_data([])
    assert collection.is_valid() is False


def test_callables_are_accepted_directly(factory):
    field = factory.create_input({
        "name": "n",
        "filters": [str.strip],
        "validators": [StringLength(min_length=2), lambda v: v.isalpha()],
    })

    field.set_value(" ab ")
    assert field.is_valid() is True
    field.set_value(" a1 ")
    assert field.is_valid() is False
    assert list(field.get_messages()) == ["<lambda>"]


def test_empty_spec_builds_empty_filter(factory):
    form = factory.create_input_filter({})
    assert isinstance(form, InputFilter)
    assert len(form) == 0


@pytest.mark.parametrize(
    "spec",
    [
        {"inputs": {"a": {"requird": True}}},
        {"inputs": {"a": {"required": "sometimes"}}},
        {"inputs": {"tags": {"input_filter": {}, "count": -1}}},
        {"inputs": ["a", "b"]},
    ],
)
def test_malformed_specs_raise_invalid_specification(factory, spec):
    with pytest.raises(ConfigurationError) as exc:
        factory.create_input_filter(spec)
    assert exc.value.code is ErrorCode.E8004_INVALID_SPECIFICATION
    assert exc.value.error.metadata["errors"]


def test_unknown_plugin_raises(factory):
    with pytest.raises(ConfigurationError) as exc:
        factory.create_input({"name": "a", "validators": ["no_such_validator"]})
    assert exc.value.code is ErrorCode.E8005_UNKNOWN_PLUGIN
    assert exc.value.error.metadata == {"kind": "validator", "name": "no_such_validator"}


def test_bad_plugin_options_raise_invalid_specification(factory):
    with pytest.raises(ConfigurationError) as exc:
        factory.create_input({"name": "a", "validators": [{"name": "string_length", "options": {"minimum": 3}}]})
    assert exc.value.code is ErrorCode.E8004_INVALID_SPECIFICATION


def test_custom_registries():
    validators = ValidatorRegistry().register("even", lambda: CustomValidator(lambda v: v % 2 == 0, name="even"))
    filters = FilterRegistry({"double": lambda: (lambda v: v * 2)})
    factory = Factory(filters=filters, validators=validators)

    field = factory.create_input({"name": "n", "filters": ["double"], "validators": ["even"]})
    field.set_value(3)
    assert field.get_value() == 6
    assert field.is_valid() is True
    assert "trim" in filters
    assert validators.has("string_length")


def test_one_of_options(factory):
    field = factory.create_input({
        "name": "colour",
        "validators": [{"name": "one_of", "options": {"haystack": ["red", "green"], "case_sensitive": False}}],
    })
    field.set_value("RED")
    assert field.is_valid() is True


def test_try_create_returns_err_instead_of_raising(factory):
    result = factory.try_create_input_filter({"inputs": {"a": {"filters": ["nope"]}}})
    assert result.is_err()
    assert result.unwrap_err().code is ErrorCode.E8005_UNKNOWN_PLUGIN

    assert factory.try_create_input_filter({"inputs": {"a": {}}}).is_ok()


# ---------------------------------------------------------------------------
# Named input filters
# ---------------------------------------------------------------------------

CONFIG = {
    "input_filter_specs": {
        "login": {
            "inputs": {
                "email": {"validators": ["email"]},
                "password": {"validators": [{"name": "string_length", "options": {"min_length": 8}}]},
            },
        },
    },
}


def test_registry_builds_fresh_filters_by_name():
    registry = InputFilterRegistry.from_config(CONFIG)

    assert registry.has("login")
    first, second = registry.get("login"), registry.get("login")
    assert first is not second
    assert list(first) == ["email", "password"]


def test_registry_without_config_section_is_empty():
    registry = InputFilterRegistry.from_config({})
    assert "login" not in registry


def test_registry_unknown_name_raises():
    registry = InputFilterRegistry()
    with pytest.raises(ConfigurationError) as exc:
        registry.get("login")
    assert exc.value.code is ErrorCode.E8005_UNKNOWN_PLUGIN


def test_registry_register():
    registry = InputFilterRegistry().register("search", {"inputs": {"q": {"filters": ["trim"]}}})
    search = registry.get("search")
    search.set_data({"q": "  python "})
    assert search.is_valid() is True
    assert search.get_values() == {"q": "python"}
