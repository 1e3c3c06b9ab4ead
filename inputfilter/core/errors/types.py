"""Monadic Error Handling Types

Result/Either types for composable error propagation at the edges of the
engine (factory construction, boundary parsing). Validation failures inside
the engine are data, not errors; these types carry configuration problems
and boundary rejections.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Generic, NoReturn, TypeVar, Union, final
from uuid import uuid4

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound="AppError")


class ErrorCode(Enum):
    """Error code taxonomy.

    E2xxx: Validation failures (expected, reported as data)
    E8xxx: Configuration errors (fatal, raised immediately)
    E9xxx: Anything else
    """
    # Validation (E2xxx)
    E2000_VALIDATION_GENERIC = 2000
    E2001_REQUIRED_FIELD_MISSING = 2001
    E2002_INVALID_FORMAT = 2002
    E2003_OUT_OF_RANGE = 2003
    E2004_INVALID_TYPE = 2004
    E2005_CONSTRAINT_VIOLATION = 2005
    E2010_INVALID_EMAIL = 2010
    E2011_INVALID_UUID = 2011
    E2012_INVALID_DATE = 2012

    # Configuration (E8xxx)
    E8000_CONFIGURATION_GENERIC = 8000
    E8001_UNKNOWN_INPUT = 8001
    E8002_INVALID_COUNT = 8002
    E8003_INVALID_DATA = 8003
    E8004_INVALID_SPECIFICATION = 8004
    E8005_UNKNOWN_PLUGIN = 8005

    # Internal (E9xxx)
    E9001_UNEXPECTED_ERROR = 9001

    @property
    def category(self) -> str:
        if 2000 <= self.value < 3000:
            return "validation"
        if 8000 <= self.value < 9000:
            return "configuration"
        return "internal"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Where and when an error was produced; the correlation id ties log lines to responses."""
    correlation_id: str = field(default_factory=lambda: uuid4().hex[:8])
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    origin: str = ""


@dataclass(frozen=True, slots=True)
class AppError:
    """Typed error: code, human-readable message, structured metadata, context, optional cause."""
    code: ErrorCode
    message: str
    context: ErrorContext = field(default_factory=ErrorContext)
    metadata: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def with_origin(self, origin: str) -> AppError:
        return replace(self, context=replace(self.context, origin=origin))

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses and log shipping."""
        return {
            "error": {
                "code": self.code.name,
                "code_num": self.code.value,
                "message": self.message,
                "category": self.code.category,
                "origin": self.context.origin,
                "correlation_id": self.context.correlation_id,
                "timestamp": self.context.timestamp.isoformat(),
                "metadata": self.metadata,
            }
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (correlation_id={self.context.correlation_id})"


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant of Result."""
    value: T

    def is_ok(self) -> bool: return True

    def is_err(self) -> bool: return False

    def unwrap(self) -> T: return self.value

    def unwrap_or(self, default: Any) -> T: return self.value

    def map(self, f: Callable[[T], U]) -> Ok[U]: return Ok(f(self.value))

    def and_then(self, f: Callable[[T], Result[U, AppError]]) -> Result[U, AppError]: return f(self.value)

    def match(self, ok: Callable[[T], U], err: Callable[[AppError], U]) -> U: return ok(self.value)


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure variant of Result; always wraps an AppError."""
    error: E

    def is_ok(self) -> bool: return False

    def is_err(self) -> bool: return True

    def unwrap(self) -> NoReturn:
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T: return default

    def unwrap_err(self) -> E: return self.error

    def map(self, f: Callable[[Any], Any]) -> Err[E]: return self

    def and_then(self, f: Callable[[Any], Any]) -> Err[E]: return self

    def match(self, ok: Callable[[Any], U], err: Callable[[E], U]) -> U: return err(self.error)


Result = Union[Ok[T], Err[E]]


def from_exception(exc: Exception, code: ErrorCode = ErrorCode.E9001_UNEXPECTED_ERROR,
                   origin: str = "", **metadata) -> Err[AppError]:
    """Wrap an arbitrary exception, keeping it as the cause."""
    return Err(AppError(code=code, message=str(exc) or type(exc).__name__,
        context=ErrorContext(origin=origin), metadata=metadata, cause=exc))


def try_result(f: Callable[[], T], code: ErrorCode = ErrorCode.E9001_UNEXPECTED_ERROR,
               origin: str = "") -> Result[T, AppError]:
    """Run ``f`` and capture any exception as an Err.

    AppErrorException keeps its own error (re-tagged with ``origin``); anything
    else becomes an Err with ``code``.
    """
    from .handlers import AppErrorException

    try:
        return Ok(f())
    except AppErrorException as e:
        return Err(e.error.with_origin(origin) if origin else e.error)
    except Exception as e:
        return from_exception(e, code=code, origin=origin)
