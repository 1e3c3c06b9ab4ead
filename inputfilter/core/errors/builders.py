"""Domain-Specific Error Builders

Ergonomic constructors for typed errors. Each builder creates an AppError
with the appropriate code and context wrapped in Err.
"""
from typing import Any

from .types import AppError, ErrorCode, ErrorContext, Err


# =============================================================================
# Validation Errors (E2xxx)
# =============================================================================

def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    field: str | None = None,
    origin: str = "",
    **metadata,
) -> Err[AppError]:
    """Create validation error."""
    meta = {"field": field, **metadata}
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in meta.items() if v is not None},
    ))


def input_filter_invalid(
    messages: dict[str, Any],
    *,
    unknown: Any = None,
    origin: str = "",
) -> Err[AppError]:
    """Wrap a failed input filter pass as a single validation error."""
    return validation_error(
        f"Validation failed for {len(messages)} input(s): {', '.join(str(k) for k in messages)}",
        origin=origin,
        messages=messages,
        unknown=unknown or None,
    )


# =============================================================================
# Configuration Errors (E8xxx)
# =============================================================================

def configuration_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E8000_CONFIGURATION_GENERIC,
    origin: str = "",
    **metadata,
) -> Err[AppError]:
    """Create configuration error."""
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in metadata.items() if v is not None},
    ))


def unknown_input(name: str, origin: str = "") -> Err[AppError]:
    return configuration_error(
        f"Input filter does not contain an input named '{name}'",
        code=ErrorCode.E8001_UNKNOWN_INPUT,
        origin=origin,
        name=name,
    )


def invalid_count(count: Any, origin: str = "") -> Err[AppError]:
    return configuration_error(
        f"Collection count must be a non-negative integer, got {count!r}",
        code=ErrorCode.E8002_INVALID_COUNT,
        origin=origin,
        count=repr(count),
    )


def invalid_data(expected: str, got: Any, origin: str = "") -> Err[AppError]:
    return configuration_error(
        f"Expected {expected} as data, got {type(got).__name__}",
        code=ErrorCode.E8003_INVALID_DATA,
        origin=origin,
        expected=expected,
        actual=type(got).__name__,
    )


def invalid_specification(reason: str, origin: str = "", **metadata) -> Err[AppError]:
    return configuration_error(
        f"Invalid specification: {reason}",
        code=ErrorCode.E8004_INVALID_SPECIFICATION,
        origin=origin,
        **metadata,
    )


def unknown_plugin(kind: str, name: str, origin: str = "") -> Err[AppError]:
    return configuration_error(
        f"No {kind} registered under the name '{name}'",
        code=ErrorCode.E8005_UNKNOWN_PLUGIN,
        origin=origin,
        kind=kind,
        name=name,
    )
