from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

import pytest

from inputfilter.validation import (
    ISO8601ToDateTime,
    StringToBool,
    StringToDecimal,
    StringToFloat,
    StringToInt,
    StringToUUID,
    StringTrim,
    ToNull,
    lower,
    normalize_whitespace,
    strip_control_chars,
    title,
    trim,
    upper,
)


@pytest.mark.parametrize(
    "fn,value,expected",
    [
        (trim, "  a  ", "a"),
        (lower, "AbC", "abc"),
        (upper, "AbC", "ABC"),
        (title, "ada lovelace", "Ada Lovelace"),
        (normalize_whitespace, " a \t b\n c ", "a b c"),
        (strip_control_chars, "a\x00b\tc", "ab\tc"),
        (StringTrim("/"), "/path/", "path"),
        (ToNull(), "", None),
        (ToNull(), [], None),
        (ToNull(), 0, 0),
    ],
)
def test_transformers(fn, value, expected):
    assert fn(value) == expected


@pytest.mark.parametrize("fn", [trim, lower, upper, title, normalize_whitespace, strip_control_chars, StringTrim()])
def test_string_filters_pass_other_types_through(fn):
    assert fn(42) == 42
    assert fn(None) is None


@pytest.mark.parametrize(
    "rule,value,expected",
    [
        (StringToInt(), " 42 ", 42),
        (StringToInt(allow_float_strings=True), "4.0", 4),
        (StringToFloat(), "1.5", 1.5),
        (StringToDecimal(), "0.10", Decimal("0.10")),
        (StringToBool(), "Yes", True),
        (StringToBool(), "off", False),
        (ISO8601ToDateTime(), "2024-05-01T10:00:00Z", datetime(2024, 5, 1, 10, tzinfo=timezone.utc)),
        (StringToUUID(), "12345678-1234-5678-1234-567812345678", UUID("12345678-1234-5678-1234-567812345678")),
    ],
)
def test_coercion(rule, value, expected):
    assert rule(value) == expected


@pytest.mark.parametrize(
    "rule,value",
    [
        (StringToInt(), "4.2"),
        (StringToInt(), ""),
        (StringToFloat(), "abc"),
        (StringToDecimal(), "1,5"),
        (StringToBool(), "maybe"),
        (ISO8601ToDateTime(), "yesterday"),
        (StringToUUID(), "not-a-uuid"),
        (StringToInt(), 7),
    ],
)
def test_failed_coercion_leaves_value_untouched(rule, value):
    assert rule(value) == value


def test_coerce_returns_result():
    assert StringToInt().coerce("12").unwrap() == 12
    assert StringToBool().coerce("maybe").is_err()
