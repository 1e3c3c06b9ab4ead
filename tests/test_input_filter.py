import pytest

from inputfilter import VALIDATE_ALL, CollectionInputFilter, ConfigurationError, Input, InputFilter
from inputfilter.core.config import settings
from inputfilter.core.errors import ErrorCode
from inputfilter.validation import CustomValidator, Identical, NumericRange, StringLength, StringToInt, StringTrim


def _address() -> InputFilter:
    return InputFilter({
        "street": Input(filters=[StringTrim()]),
        "zip": Input(validators=[StringLength(min_length=5, max_length=5)]),
    })


# ---------------------------------------------------------------------------
# Basic validation
# ---------------------------------------------------------------------------

def test_short_username_is_reported_with_constraint_message(username_filter):
    username_filter.set_data({"username": "  ab  "})

    assert username_filter.is_valid() is False
    assert username_filter.get_messages() == {
        "username": {"min_length[3]": "String length 2 is less than minimum 3"},
    }
    assert username_filter.get_raw_value("username") == "  ab  "
    assert username_filter.get_value("username") == "ab"


def test_valid_username_exposes_filtered_values(username_filter):
    username_filter.set_data({"username": "  alice "})

    assert username_filter.is_valid() is True
    assert username_filter.get_messages() == {}
    assert username_filter.get_values() == {"username": "alice"}
    assert username_filter.get_raw_values() == {"username": "  alice "}
    assert list(username_filter.get_valid_input()) == ["username"]


def test_every_sibling_is_evaluated(make_spy):
    first, first_fn = make_spy(result=False, name="first")
    second, second_fn = make_spy(result=False, name="second")
    form = InputFilter({"a": Input(validators=[first]), "b": Input(validators=[second])})
    form.set_data({"a": "1", "b": "2"})

    assert form.is_valid() is False
    assert set(form.get_invalid_input()) == {"a", "b"}
    first_fn.assert_called_once_with("1")
    second_fn.assert_called_once_with("2")


def test_missing_required_key_reports_is_empty():
    form = InputFilter({"name": Input(), "nickname": Input(required=False)})
    form.set_data({})

    assert form.is_valid() is False
    assert form.get_messages() == {"name": {"is_empty": settings.REQUIRED_MESSAGE}}
    assert form.get_values() == {"name": None, "nickname": None}


def test_validation_is_idempotent(username_filter):
    username_filter.set_data({"username": "ab"})
    first = (username_filter.is_valid(), username_filter.get_messages())
    second = (username_filter.is_valid(), username_filter.get_messages())
    assert first == second


def test_unknown_keys_are_reported_but_do_not_invalidate(username_filter):
    username_filter.set_data({"username": "alice", "is_admin": True})

    assert username_filter.is_valid() is True
    assert username_filter.has_unknown() is True
    assert username_filter.get_unknown() == {"is_admin": True}
    assert "is_admin" not in username_filter.get_values()


def test_is_valid_without_data_raises():
    with pytest.raises(ConfigurationError):
        InputFilter({"name": Input()}).is_valid()


@pytest.mark.parametrize("data", [["name"], "name=alice", None])
def test_set_data_rejects_non_mappings(data):
    with pytest.raises(ConfigurationError) as exc:
        InputFilter().set_data(data)
    assert exc.value.code is ErrorCode.E8003_INVALID_DATA


def test_get_unknown_child_raises():
    with pytest.raises(ConfigurationError) as exc:
        InputFilter().get("missing")
    assert exc.value.code is ErrorCode.E8001_UNKNOWN_INPUT


# ---------------------------------------------------------------------------
# Nesting
# ---------------------------------------------------------------------------

def test_nested_filter_values_are_dicts():
    form = InputFilter({"name": Input(), "address": _address()})
    form.set_data({"name": "Ada", "address": {"street": " Main St ", "zip": "12345"}})

    assert form.is_valid() is True
    assert form.get_value("address") == {"street": "Main St", "zip": "12345"}
    assert form.get_raw_value("address") == {"street": " Main St ", "zip": "12345"}


def test_nested_failures_produce_nested_messages():
    form = InputFilter({"address": _address()})
    form.set_data({"address": {"street": "Main", "zip": "123"}})

    assert form.is_valid() is False
    assert form.get_messages() == {
        "address": {"zip": {"length[5,5]": "String length 3 is less than minimum 5"}},
    }


@pytest.mark.parametrize("payload", [{}, {"address": "not a mapping"}])
def test_absent_or_malformed_nested_payload_validates_as_empty(payload):
    form = InputFilter({"address": _address()})
    form.set_data(payload)

    assert form.is_valid() is False
    assert set(form.get_messages()["address"]) == {"street", "zip"}


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------

def test_context_defaults_to_own_data():
    form = InputFilter({
        "password": Input(),
        "password_confirm": Input(validators=[Identical("password")]),
    })

    form.set_data({"password": "s3cret", "password_confirm": "s3cret"})
    assert form.is_valid() is True

    form.set_data({"password": "s3cret", "password_confirm": "secret"})
    assert form.is_valid() is False
    assert list(form.get_messages()["password_confirm"]) == ["identical[password]"]


def test_nested_filter_uses_its_own_data_as_context():
    inner = InputFilter({"a": Input(), "b": Input(validators=[Identical("a")])})
    form = InputFilter({"inner": inner, "a": Input()})
    form.set_data({"a": "outer", "inner": {"a": "x", "b": "x"}})

    assert form.is_valid() is True


def test_explicit_context_is_passed_through(make_spy):
    spy, fn = make_spy(takes_context=True)
    form = InputFilter({"inner": InputFilter({"field": Input(validators=[spy])})})
    form.set_data({"inner": {"field": "v"}})
    context = {"tenant": "acme"}

    assert form.is_valid(context) is True
    fn.assert_called_once_with("v", context)
    assert fn.call_args.args[1] is context


def test_explicit_context_reaches_inputs_inside_nested_collections(make_spy):
    spy, fn = make_spy(takes_context=True)
    lines = CollectionInputFilter(InputFilter({"sku": Input(validators=[spy])}))
    form = InputFilter({"order": InputFilter({"lines": lines})})
    form.set_data({"order": {"lines": [{"sku": "A-1"}]}})
    context = object()

    assert form.is_valid(context) is True
    fn.assert_called_once()
    assert fn.call_args.args == ("A-1", context)
    assert fn.call_args.args[1] is context


# ---------------------------------------------------------------------------
# Validation groups
# ---------------------------------------------------------------------------

def test_validation_group_restricts_validation_and_values():
    form = InputFilter({"name": Input(), "email": Input()})
    form.set_data({"name": "Ada"})
    form.set_validation_group("name")

    assert form.is_valid() is True
    assert form.get_values() == {"name": "Ada"}

    form.set_validation_group(VALIDATE_ALL)
    assert form.get_validation_group() is None
    assert form.is_valid() is False


def test_validation_group_accepts_a_list():
    form = InputFilter({"a": Input(), "b": Input(), "c": Input()})
    form.set_validation_group(["a", "c"])
    assert form.get_validation_group() == ["a", "c"]


def test_nested_validation_group():
    form = InputFilter({"name": Input(), "address": _address()})
    form.set_data({"name": "Ada", "address": {"street": "Main"}})
    form.set_validation_group({"name": None, "address": ["street"]})

    assert form.is_valid() is True
    assert form.get_values() == {"name": "Ada", "address": {"street": "Main"}}


def test_validation_group_with_unknown_name_raises():
    with pytest.raises(ConfigurationError) as exc:
        InputFilter({"a": Input()}).set_validation_group("b")
    assert exc.value.code is ErrorCode.E8001_UNKNOWN_INPUT


def test_nested_group_on_plain_input_raises():
    with pytest.raises(ConfigurationError):
        InputFilter({"a": Input()}).set_validation_group({"a": ["x"]})


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

def test_add_uses_input_name():
    form = InputFilter().add(Input("email"))
    assert form.has("email")
    assert "email" in form
    assert list(form) == ["email"]


def test_add_without_any_name_raises():
    with pytest.raises(ConfigurationError):
        InputFilter().add(Input())


def test_add_rejects_non_nodes():
    with pytest.raises(ConfigurationError):
        InputFilter().add(lambda v: v, "fn")


def test_adding_input_under_existing_name_merges():
    form = InputFilter()
    form.add(Input("age", filters=[StringToInt()]))
    form.add(Input("age", validators=[NumericRange(min_value=18)]))
    form.set_data({"age": "16"})

    assert len(form) == 1
    assert form.is_valid() is False
    assert form.get_value("age") == 16


def test_remove_drops_child_and_group_entry():
    form = InputFilter({"a": Input(), "b": Input()})
    form.set_validation_group("a", "b")
    form.remove("a")

    assert not form.has("a")
    assert form.get_validation_group() == ["b"]


def test_clone_is_independent():
    form = InputFilter({"name": Input(validators=[CustomValidator(lambda v: v != "bad", name="not_bad")])})
    form.set_data({"name": "good"})
    copy = form.clone()
    copy.set_data({"name": "bad"})

    assert form.is_valid() is True
    assert copy.is_valid() is False
    assert form.get_value("name") == "good"


# ---------------------------------------------------------------------------
# Specification mappings
# ---------------------------------------------------------------------------

def test_factory_is_composed_lazily():
    from inputfilter import Factory

    form = InputFilter()
    assert isinstance(form.get_factory(), Factory)
    assert form.get_factory() is form.get_factory()

    factory = Factory()
    assert form.set_factory(factory).get_factory() is factory


def test_add_accepts_a_specification_mapping():
    form = InputFilter()
    form.add({"name": "foo"})
    form.add({"inputs": {"city": {"filters": ["trim"]}}}, "address")

    assert isinstance(form.get("foo"), Input)
    assert isinstance(form.get("address"), InputFilter)

    form.set_data({"foo": "x", "address": {"city": " Oslo "}})
    assert form.is_valid() is True
    assert form.get_values() == {"foo": "x", "address": {"city": "Oslo"}}


def test_constructor_accepts_specification_mappings():
    form = InputFilter({"email": {"validators": ["email"]}})
    form.set_data({"email": "nope"})
    assert form.is_valid() is False
    assert list(form.get_messages()["email"]) == ["email"]
