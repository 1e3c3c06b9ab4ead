"""Raisable Error Wrappers

Bridges the Result-based error types to code paths that must raise:
configuration mistakes are programming errors and surface immediately.
"""
from __future__ import annotations

from typing import NoReturn, TypeVar

from inputfilter.core.logging import get_logger

from .types import AppError, Err, Result

T = TypeVar("T")

log = get_logger("inputfilter.errors")


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Use this when you need to raise an AppError in code that
    doesn't use the Result monad.
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(str(error))

    @property
    def code(self):
        return self.error.code


class ConfigurationError(AppErrorException):
    """Fatal misconfiguration of an input, filter tree or factory spec."""


def raise_error(result: Err[AppError]) -> NoReturn:
    """Raise the error carried by an Err as a ConfigurationError."""
    error = result.unwrap_err()
    log.warning("configuration_error", error_code=error.code.name, message=error.message, origin=error.context.origin)
    raise ConfigurationError(error)


def raise_result(result: Result[T, AppError]) -> T:
    """Unwrap Ok or raise the Err."""
    if result.is_err():
        raise_error(result)
    return result.unwrap()
