"""Value Filters

Filters are total callables ``value -> value`` attached to a FilterChain.
They never signal failure: a filter that does not apply to a value returns
it unchanged and leaves the verdict to the validators.

Two flavours:
- String transformers: plain functions (trim, lower, ...)
- Coercion rules: frozen dataclasses with explicit ``can_coerce``/``coerce``
  returning a Result; calling the rule falls back to the original value
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Generic, TypeVar
from uuid import UUID

from inputfilter.core.errors import AppError, Err, ErrorCode, Ok, Result

T = TypeVar("T")
S = TypeVar("S")


# ============================================================================
# String Transformers
# ============================================================================

trim = lambda v: v.strip() if isinstance(v, str) else v
lower = lambda v: v.lower() if isinstance(v, str) else v
upper = lambda v: v.upper() if isinstance(v, str) else v
title = lambda v: v.title() if isinstance(v, str) else v
normalize_whitespace = lambda v: " ".join(v.split()) if isinstance(v, str) else v
strip_control_chars = lambda v: "".join(c for c in v if c.isprintable() or c in "\n\t") if isinstance(v, str) else v


@dataclass(frozen=True, slots=True)
class StringTrim:
    """Strip the given characters (whitespace by default) from both ends."""
    chars: str | None = None

    def __call__(self, value: Any) -> Any:
        return value.strip(self.chars) if isinstance(value, str) else value


@dataclass(frozen=True, slots=True)
class ToNull:
    """Convert empty strings and empty containers to None."""

    def __call__(self, value: Any) -> Any:
        if value == "" or (isinstance(value, (list, tuple, dict)) and not value):
            return None
        return value


# ============================================================================
# Coercion Rules
# ============================================================================

@dataclass(frozen=True, slots=True)
class CoercionRule(ABC, Generic[S, T]):
    """Base class for coercion filters.

    Each rule defines:
    - Whether a value can be coerced
    - The coercion itself, as a Result

    Used as a filter, a failed coercion leaves the value untouched.
    """

    @abstractmethod
    def can_coerce(self, value: Any) -> bool:
        """Check if value can be coerced to target type."""

    @abstractmethod
    def coerce(self, value: Any) -> Result[T, AppError]:
        """Coerce value to target type. Returns Result."""

    def __call__(self, value: Any) -> Any:
        if not self.can_coerce(value):
            return value
        return self.coerce(value).unwrap_or(value)


@dataclass(frozen=True, slots=True)
class StringToInt(CoercionRule[str, int]):
    """Coerce string to integer."""
    allow_float_strings: bool = False

    def can_coerce(self, value: Any) -> bool:
        if not isinstance(value, str) or not value.strip():
            return False
        try:
            float(value.strip()) if self.allow_float_strings else int(value.strip())
            return True
        except ValueError:
            return False

    def coerce(self, value: Any) -> Result[int, AppError]:
        try:
            stripped = value.strip()
            return Ok(int(float(stripped)) if self.allow_float_strings else int(stripped))
        except (AttributeError, ValueError) as e:
            return Err(AppError(
                code=ErrorCode.E2002_INVALID_FORMAT,
                message=f"Cannot coerce '{value}' to int: {e}",
                metadata={"value": value, "target": "int"},
            ))


@dataclass(frozen=True, slots=True)
class StringToFloat(CoercionRule[str, float]):
    """Coerce string to float."""

    def can_coerce(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        try:
            float(value.strip())
            return True
        except ValueError:
            return False

    def coerce(self, value: Any) -> Result[float, AppError]:
        try:
            return Ok(float(value.strip()))
        except (AttributeError, ValueError) as e:
            return Err(AppError(
                code=ErrorCode.E2002_INVALID_FORMAT,
                message=f"Cannot coerce '{value}' to float: {e}",
            ))


@dataclass(frozen=True, slots=True)
class StringToDecimal(CoercionRule[str, Decimal]):
    """Coerce string to Decimal without float rounding."""

    def can_coerce(self, value: Any) -> bool:
        return isinstance(value, str) and self.coerce(value).is_ok()

    def coerce(self, value: Any) -> Result[Decimal, AppError]:
        try:
            return Ok(Decimal(value.strip()))
        except (AttributeError, InvalidOperation) as e:
            return Err(AppError(
                code=ErrorCode.E2002_INVALID_FORMAT,
                message=f"Cannot coerce '{value}' to Decimal: {e}",
            ))


@dataclass(frozen=True, slots=True)
class StringToBool(CoercionRule[str, bool]):
    """Coerce string to boolean.

    Truthy: "true", "1", "yes", "on", "y"
    Falsy: "false", "0", "no", "off", "n"
    """
    true_values: frozenset[str] = frozenset({"true", "1", "yes", "on", "y"})
    false_values: frozenset[str] = frozenset({"false", "0", "no", "off", "n"})

    def can_coerce(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        lowered = value.strip().lower()
        return lowered in self.true_values or lowered in self.false_values

    def coerce(self, value: Any) -> Result[bool, AppError]:
        lowered = value.strip().lower() if isinstance(value, str) else ""
        if lowered in self.true_values:
            return Ok(True)
        if lowered in self.false_values:
            return Ok(False)
        return Err(AppError(
            code=ErrorCode.E2002_INVALID_FORMAT,
            message=f"Cannot coerce '{value}' to bool. Valid values: {sorted(self.true_values | self.false_values)}",
        ))


@dataclass(frozen=True, slots=True)
class ISO8601ToDateTime(CoercionRule[str, datetime]):
    """Coerce an ISO8601 string (a trailing 'Z' is accepted) to datetime."""

    def can_coerce(self, value: Any) -> bool:
        return isinstance(value, str) and self.coerce(value).is_ok()

    def coerce(self, value: Any) -> Result[datetime, AppError]:
        try:
            return Ok(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
        except (AttributeError, ValueError) as e:
            return Err(AppError(
                code=ErrorCode.E2012_INVALID_DATE,
                message=f"Cannot coerce '{value}' to datetime: {e}",
            ))


@dataclass(frozen=True, slots=True)
class StringToUUID(CoercionRule[str, UUID]):
    """Coerce string to UUID."""

    def can_coerce(self, value: Any) -> bool:
        return isinstance(value, str) and self.coerce(value).is_ok()

    def coerce(self, value: Any) -> Result[UUID, AppError]:
        try:
            return Ok(UUID(value.strip()))
        except (AttributeError, ValueError) as e:
            return Err(AppError(
                code=ErrorCode.E2011_INVALID_UUID,
                message=f"Cannot coerce '{value}' to UUID: {e}",
            ))
