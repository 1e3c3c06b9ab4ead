"""Compositional Validator System

Atomic validators plug into a ValidatorChain and combine via AND/OR/NOT
combinators. Every validator receives the filtered value plus the read-only
validation context (by default the owning input filter's data).

Features:
- Frozen dataclass validators: stateless, safe to share between cloned trees
- Rich validation metadata for error context
- Context-aware validators (Identical compares against a sibling field)
"""
from __future__ import annotations

import inspect
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from email.utils import parseaddr
from typing import Any, Callable
from uuid import UUID as StdUUID

from inputfilter.core.errors import ErrorCode


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Result of a validation check with rich context."""
    is_valid: bool
    error_message: str | None = None
    error_code: ErrorCode | None = None
    constraint: str | None = None
    expected: Any = None
    actual: Any = None
    metadata: dict[str, Any] | None = None

    @classmethod
    def valid(cls) -> ValidationResult: return cls(is_valid=True)

    @classmethod
    def invalid(cls, message: str, code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC, *,
                constraint: str | None = None, expected: Any = None, actual: Any = None, **metadata) -> ValidationResult:
        return cls(is_valid=False, error_message=message, error_code=code, constraint=constraint,
            expected=expected, actual=actual, metadata=metadata or None)

    def to_dict(self) -> dict[str, Any]:
        if self.is_valid: return {"valid": True}
        return {"valid": False, "message": self.error_message, "code": self.error_code.name if self.error_code else None,
            "constraint": self.constraint, "expected": self.expected, "actual": self.actual, **(self.metadata or {})}


class AtomicValidator(ABC):
    """Base class for atomic validators.

    Validators are immutable and composable via operators:
    - & (AND): both must pass
    - | (OR): at least one must pass
    - ~ (NOT): negates the validator
    """

    @abstractmethod
    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        """Validate a value. Returns ValidationResult."""

    @property
    @abstractmethod
    def constraint_name(self) -> str:
        """Constraint name; used as the message key when a check fails."""

    def __call__(self, value: Any, context: Any = None) -> ValidationResult: return self.validate(value, context)

    def __and__(self, other: AtomicValidator) -> And: return And(self, other)

    def __or__(self, other: AtomicValidator) -> Or: return Or(self, other)

    def __invert__(self) -> Not: return Not(self)

    def with_message(self, message: str) -> WithMessage: return WithMessage(self, message)


def _type_error(value: Any, expected: str) -> ValidationResult:
    return ValidationResult.invalid(
        f"Expected {expected}, got {type(value).__name__}",
        ErrorCode.E2004_INVALID_TYPE,
        constraint=expected,
        expected=expected,
        actual=type(value).__name__,
    )


# ============================================================================
# String Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class StringLength(AtomicValidator):
    """Validate string length constraints."""
    min_length: int | None = None
    max_length: int | None = None

    @property
    def constraint_name(self) -> str:
        if self.min_length and self.max_length:
            return f"length[{self.min_length},{self.max_length}]"
        if self.min_length:
            return f"min_length[{self.min_length}]"
        if self.max_length:
            return f"max_length[{self.max_length}]"
        return "string_length"

    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        if not isinstance(value, str):
            return _type_error(value, "string")

        length = len(value)

        if self.min_length is not None and length < self.min_length:
            return ValidationResult.invalid(
                f"String length {length} is less than minimum {self.min_length}",
                ErrorCode.E2003_OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f">= {self.min_length} characters",
                actual=f"{length} characters",
            )

        if self.max_length is not None and length > self.max_length:
            return ValidationResult.invalid(
                f"String length {length} exceeds maximum {self.max_length}",
                ErrorCode.E2003_OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f"<= {self.max_length} characters",
                actual=f"{length} characters",
            )

        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class NonEmpty(AtomicValidator):
    """Validate that a string is not empty or whitespace-only."""
    strip_whitespace: bool = True

    @property
    def constraint_name(self) -> str:
        return "non_empty"

    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        if not isinstance(value, str):
            return _type_error(value, "string")

        check_value = value.strip() if self.strip_whitespace else value
        if not check_value:
            return ValidationResult.invalid(
                "String cannot be empty",
                ErrorCode.E2001_REQUIRED_FIELD_MISSING,
                constraint=self.constraint_name,
                expected="non-empty string",
                actual="empty string",
            )

        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class RegexPattern(AtomicValidator):
    """Validate string against regex pattern."""
    pattern: str
    flags: int = 0
    description: str | None = None

    @property
    def constraint_name(self) -> str:
        return self.description or f"pattern[{self.pattern}]"

    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        if not isinstance(value, str):
            return _type_error(value, "string")

        if not re.match(self.pattern, value, self.flags):
            return ValidationResult.invalid(
                f"Value does not match pattern: {self.description or self.pattern}",
                ErrorCode.E2002_INVALID_FORMAT,
                constraint=self.constraint_name,
                expected=f"match pattern '{self.pattern}'",
                actual=value[:50] + ("..." if len(value) > 50 else ""),
            )

        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class OneOf(AtomicValidator):
    """Validate value is one of allowed options."""
    options: frozenset
    case_sensitive: bool = True

    def __init__(self, *options: Any, case_sensitive: bool = True):
        object.__setattr__(self, "options", frozenset(options)); object.__setattr__(self, "case_sensitive", case_sensitive)

    @property
    def constraint_name(self) -> str:
        opts = sorted(str(o) for o in self.options)[:5]
        suffix = f"... +{len(self.options) - 5}" if len(self.options) > 5 else ""
        return f"one_of[{', '.join(opts)}{suffix}]"

    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        if self.case_sensitive or not isinstance(value, str):
            found = value in self.options if _hashable(value) else False
        else:
            found = value.lower() in {o.lower() for o in self.options if isinstance(o, str)}

        if not found:
            allowed = sorted(str(o) for o in self.options)
            return ValidationResult.invalid(f"Value '{value}' is not one of: {', '.join(allowed)}",
                ErrorCode.E2005_CONSTRAINT_VIOLATION, constraint=self.constraint_name,
                expected=allowed, actual=value)
        return ValidationResult.valid()


def _hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


# ============================================================================
# Numeric Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class NumericRange(AtomicValidator):
    """Validate numeric range constraints."""
    min_value: float | int | None = None
    max_value: float | int | None = None
    exclusive_min: bool = False
    exclusive_max: bool = False

    @property
    def constraint_name(self) -> str:
        parts = []
        if self.min_value is not None:
            op = ">" if self.exclusive_min else ">="
            parts.append(f"{op}{self.min_value}")
        if self.max_value is not None:
            op = "<" if self.exclusive_max else "<="
            parts.append(f"{op}{self.max_value}")
        return f"range[{', '.join(parts)}]" if parts else "numeric"

    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            return _type_error(value, "number")

        if self.min_value is not None:
            too_low = value <= self.min_value if self.exclusive_min else value < self.min_value
            if too_low:
                word = "greater than" if self.exclusive_min else "at least"
                return ValidationResult.invalid(
                    f"Value {value} must be {word} {self.min_value}",
                    ErrorCode.E2003_OUT_OF_RANGE,
                    constraint=self.constraint_name,
                    expected=f"{'>' if self.exclusive_min else '>='} {self.min_value}",
                    actual=value,
                )

        if self.max_value is not None:
            too_high = value >= self.max_value if self.exclusive_max else value > self.max_value
            if too_high:
                word = "less than" if self.exclusive_max else "at most"
                return ValidationResult.invalid(
                    f"Value {value} must be {word} {self.max_value}",
                    ErrorCode.E2003_OUT_OF_RANGE,
                    constraint=self.constraint_name,
                    expected=f"{'<' if self.exclusive_max else '<='} {self.max_value}",
                    actual=value,
                )

        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class Positive(AtomicValidator):
    """Validate number is positive (> 0)."""

    @property
    def constraint_name(self) -> str:
        return "positive"

    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            return _type_error(value, "number")

        if value <= 0:
            return ValidationResult.invalid(
                f"Value {value} must be positive",
                ErrorCode.E2003_OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected="> 0",
                actual=value,
            )

        return ValidationResult.valid()


# ============================================================================
# Format Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class EmailValidator(AtomicValidator):
    """Validate email address format."""
    allow_display_name: bool = False

    @property
    def constraint_name(self) -> str:
        return "email"

    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        if not isinstance(value, str):
            return _type_error(value, "string")

        # RFC 5322 simplified pattern
        pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'

        name, addr = parseaddr(value)
        check_value = addr if self.allow_display_name else value

        if not check_value or not re.match(pattern, check_value):
            return ValidationResult.invalid(
                f"Invalid email format: {value}",
                ErrorCode.E2010_INVALID_EMAIL,
                constraint=self.constraint_name,
                expected="valid email address",
                actual=value,
            )

        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class UUIDValidator(AtomicValidator):
    """Validate UUID format."""
    version: int | None = None

    @property
    def constraint_name(self) -> str:
        return f"uuid{f'v{self.version}' if self.version else ''}"

    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        if isinstance(value, StdUUID):
            parsed = value
        elif isinstance(value, str):
            try:
                parsed = StdUUID(value)
            except ValueError:
                return ValidationResult.invalid(
                    f"Invalid UUID format: {value}",
                    ErrorCode.E2011_INVALID_UUID,
                    constraint=self.constraint_name,
                    expected="valid UUID",
                    actual=value[:50] if len(value) > 50 else value,
                )
        else:
            return _type_error(value, "uuid")

        if self.version and parsed.version != self.version:
            return ValidationResult.invalid(
                f"Expected UUID version {self.version}, got version {parsed.version}",
                ErrorCode.E2011_INVALID_UUID,
                constraint=self.constraint_name,
                expected=f"UUID v{self.version}",
                actual=f"UUID v{parsed.version}",
            )
        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class DateTimeValidator(AtomicValidator):
    """Validate ISO8601 datetime format."""
    require_timezone: bool = False

    @property
    def constraint_name(self) -> str:
        return "datetime" + ("_tz" if self.require_timezone else "")

    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, str):
            try:
                parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                return ValidationResult.invalid(
                    f"Invalid ISO8601 datetime: {value}",
                    ErrorCode.E2012_INVALID_DATE,
                    constraint=self.constraint_name,
                    expected="ISO8601 datetime",
                    actual=value,
                )
        else:
            return _type_error(value, "datetime")

        if self.require_timezone and parsed.tzinfo is None:
            return ValidationResult.invalid(
                "Datetime must include timezone",
                ErrorCode.E2012_INVALID_DATE,
                constraint=self.constraint_name,
                expected="datetime with timezone",
                actual="datetime without timezone",
            )
        return ValidationResult.valid()


# ============================================================================
# Collection Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class ListLength(AtomicValidator):
    """Validate list/array length constraints."""
    min_length: int | None = None
    max_length: int | None = None

    @property
    def constraint_name(self) -> str:
        parts = []
        if self.min_length is not None:
            parts.append(f"min={self.min_length}")
        if self.max_length is not None:
            parts.append(f"max={self.max_length}")
        return f"list_length[{', '.join(parts)}]" if parts else "list"

    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        if not isinstance(value, (list, tuple)):
            return _type_error(value, "list")

        length = len(value)

        if self.min_length is not None and length < self.min_length:
            return ValidationResult.invalid(
                f"List has {length} items, minimum is {self.min_length}",
                ErrorCode.E2003_OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f">= {self.min_length} items",
                actual=f"{length} items",
            )

        if self.max_length is not None and length > self.max_length:
            return ValidationResult.invalid(
                f"List has {length} items, maximum is {self.max_length}",
                ErrorCode.E2003_OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f"<= {self.max_length} items",
                actual=f"{length} items",
            )

        return ValidationResult.valid()


# ============================================================================
# Context Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class Identical(AtomicValidator):
    """Validate value equals another field of the context (e.g. password confirmation).

    The context is the payload of the input filter being validated unless the
    caller passed an explicit context to ``is_valid``.
    """
    token: str

    @property
    def constraint_name(self) -> str:
        return f"identical[{self.token}]"

    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        if not isinstance(context, Mapping) or self.token not in context:
            return ValidationResult.invalid(
                f"No token '{self.token}' was provided to match against",
                ErrorCode.E2005_CONSTRAINT_VIOLATION,
                constraint=self.constraint_name,
                expected=self.token,
            )
        if context[self.token] != value:
            return ValidationResult.invalid(
                f"Value does not match '{self.token}'",
                ErrorCode.E2005_CONSTRAINT_VIOLATION,
                constraint=self.constraint_name,
                expected=self.token,
            )
        return ValidationResult.valid()


# ============================================================================
# Combinators
# ============================================================================

@dataclass(frozen=True, slots=True)
class And(AtomicValidator):
    """AND combinator: both validators must pass (short-circuit on first failure)."""
    left: AtomicValidator
    right: AtomicValidator

    @property
    def constraint_name(self) -> str:
        return f"({self.left.constraint_name} AND {self.right.constraint_name})"

    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        if not (left_result := self.left.validate(value, context)).is_valid: return left_result
        return self.right.validate(value, context)


@dataclass(frozen=True, slots=True)
class Or(AtomicValidator):
    """OR combinator: at least one validator must pass (lazy evaluation)."""
    left: AtomicValidator
    right: AtomicValidator

    @property
    def constraint_name(self) -> str:
        return f"({self.left.constraint_name} OR {self.right.constraint_name})"

    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        if (left_result := self.left.validate(value, context)).is_valid: return ValidationResult.valid()
        if (right_result := self.right.validate(value, context)).is_valid: return ValidationResult.valid()
        return ValidationResult.invalid(f"Neither constraint satisfied: {left_result.error_message} OR {right_result.error_message}",
            ErrorCode.E2000_VALIDATION_GENERIC, constraint=self.constraint_name,
            left_error=left_result.error_message, right_error=right_result.error_message)


@dataclass(frozen=True, slots=True)
class Not(AtomicValidator):
    """NOT combinator: negates validator."""
    validator: AtomicValidator
    message: str | None = None

    @property
    def constraint_name(self) -> str:
        return f"NOT({self.validator.constraint_name})"

    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        if self.validator.validate(value, context).is_valid:
            return ValidationResult.invalid(self.message or f"Value should not satisfy: {self.validator.constraint_name}",
                ErrorCode.E2005_CONSTRAINT_VIOLATION, constraint=self.constraint_name)
        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class WithMessage(AtomicValidator):
    """Wrapper to override error message."""
    validator: AtomicValidator
    message: str

    @property
    def constraint_name(self) -> str:
        return self.validator.constraint_name

    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        if (result := self.validator.validate(value, context)).is_valid: return result
        return ValidationResult.invalid(self.message, result.error_code or ErrorCode.E2000_VALIDATION_GENERIC,
            constraint=result.constraint, expected=result.expected, actual=result.actual)


# ============================================================================
# Custom Validator
# ============================================================================

@dataclass(frozen=True, slots=True)
class CustomValidator(AtomicValidator):
    """Custom validator from function.

    The function may return a bool or a ValidationResult. With
    ``takes_context`` it is called as ``fn(value, context)``.

    Usage:
        def is_even(n: int) -> bool:
            return n % 2 == 0

        validator = CustomValidator(is_even, name="even", message="Must be even")
    """
    validator_fn: Callable[..., bool | ValidationResult]
    name: str = "custom"
    message: str = "The input is not valid"
    takes_context: bool = False

    @classmethod
    def from_callable(cls, fn: Callable[..., Any]) -> CustomValidator:
        """Wrap a bare predicate; two or more positional parameters without defaults means it wants the context."""
        try:
            params = [
                p for p in inspect.signature(fn).parameters.values()
                if p.kind is p.VAR_POSITIONAL
                or (p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty)
            ]
        except (TypeError, ValueError):
            params = []
        takes_context = len(params) >= 2 or any(p.kind is p.VAR_POSITIONAL for p in params)
        return cls(fn, name=getattr(fn, "__name__", "custom"), takes_context=takes_context)

    @property
    def constraint_name(self) -> str:
        return self.name

    def validate(self, value: Any, context: Any = None) -> ValidationResult:
        try:
            outcome = self.validator_fn(value, context) if self.takes_context else self.validator_fn(value)
        except Exception as e:
            return ValidationResult.invalid(f"Validation error: {e}", ErrorCode.E2000_VALIDATION_GENERIC,
                constraint=self.name, exception=str(e))
        if isinstance(outcome, ValidationResult):
            return outcome
        if outcome:
            return ValidationResult.valid()
        return ValidationResult.invalid(self.message, ErrorCode.E2005_CONSTRAINT_VIOLATION, constraint=self.name, actual=value)


def custom(name: str, message: str = "The input is not valid") -> Callable[[Callable[..., Any]], CustomValidator]:
    """Decorator to create custom validator from function.

    Usage:
        @custom("even", "Must be even")
        def is_even(n: int) -> bool:
            return n % 2 == 0
    """
    def wrap(fn: Callable[..., Any]) -> CustomValidator:
        takes_context = CustomValidator.from_callable(fn).takes_context
        return CustomValidator(fn, name=name, message=message, takes_context=takes_context)
    return wrap
