import pytest

from inputfilter.core.errors import (
    AppErrorException,
    ConfigurationError,
    ErrorCode,
    Err,
    Ok,
    configuration_error,
    raise_result,
    try_result,
    unknown_input,
)


def test_error_code_categories():
    assert ErrorCode.E2003_OUT_OF_RANGE.category == "validation"
    assert ErrorCode.E8001_UNKNOWN_INPUT.category == "configuration"
    assert ErrorCode.E9001_UNEXPECTED_ERROR.category == "internal"


def test_builders_return_err_with_metadata():
    result = unknown_input("email", origin="input_filter")
    error = result.unwrap_err()

    assert isinstance(result, Err)
    assert error.code is ErrorCode.E8001_UNKNOWN_INPUT
    assert error.metadata == {"name": "email"}
    assert error.to_dict()["error"]["category"] == "configuration"


def test_result_combinators():
    assert Ok(2).map(lambda v: v * 2).unwrap() == 4
    assert Ok(2).and_then(lambda v: Err(v)).is_err()
    assert configuration_error("boom").map(lambda v: v).unwrap_or("default") == "default"
    assert Ok(1).match(ok=lambda v: "ok", err=lambda e: "err") == "ok"


def test_raise_result_raises_configuration_error():
    assert raise_result(Ok(3)) == 3
    with pytest.raises(ConfigurationError) as exc:
        raise_result(configuration_error("boom", origin="test"))
    assert isinstance(exc.value, AppErrorException)
    assert exc.value.code is ErrorCode.E8000_CONFIGURATION_GENERIC


def test_try_result_wraps_unexpected_exceptions():
    result = try_result(lambda: 1 / 0, origin="calc")
    assert result.is_err()
    assert result.unwrap_err().code is ErrorCode.E9001_UNEXPECTED_ERROR
    assert isinstance(result.unwrap_err().cause, ZeroDivisionError)
