"""Monadic Error Handling System

Key components:
- Result[T, E]: Monadic container for success/failure
- AppError: Base error type with full context
- ErrorCode: Hierarchical error code taxonomy
- Builder functions: Ergonomic error construction
- ConfigurationError: raised for misconfigured trees and specs

Usage:
    from inputfilter.core.errors import Ok, Err, Result, AppError, unknown_input

    def lookup(name: str) -> Result[Node, AppError]:
        if name not in children:
            return unknown_input(name, origin="input_filter")
        return Ok(children[name])
"""
from .types import (
    # Core types
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
    # Constructors
    from_exception,
    try_result,
)

from .builders import (
    # Validation (E2xxx)
    validation_error,
    input_filter_invalid,
    # Configuration (E8xxx)
    configuration_error,
    unknown_input,
    invalid_count,
    invalid_data,
    invalid_specification,
    unknown_plugin,
)

from .handlers import (
    AppErrorException,
    ConfigurationError,
    raise_error,
    raise_result,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    "from_exception",
    "try_result",
    "validation_error",
    "input_filter_invalid",
    "configuration_error",
    "unknown_input",
    "invalid_count",
    "invalid_data",
    "invalid_specification",
    "unknown_plugin",
    "AppErrorException",
    "ConfigurationError",
    "raise_error",
    "raise_result",
]
