"""inputfilter: filter and validate nested input payloads.

Build a tree of Inputs, InputFilters and CollectionInputFilters (by hand or
from a declarative spec via Factory), feed it a payload with set_data() and
ask is_valid(); read back filtered values, raw values, messages and unknown
keys.
"""
from inputfilter.engine import (
    MISSING,
    VALIDATE_ALL,
    COUNT_MISMATCH,
    ERROR_MESSAGE,
    IS_EMPTY,
    CollectionInputFilter,
    FilterChain,
    Input,
    InputFilter,
    ValidationNode,
    ValidatorChain,
    is_empty,
    parse_ingress,
)
from inputfilter.factory import Factory, FilterRegistry, InputFilterRegistry, ValidatorRegistry
from inputfilter.core.errors import AppError, AppErrorException, ConfigurationError, Err, Ok, Result

__version__ = "0.1.0"

__all__ = [
    "MISSING",
    "VALIDATE_ALL",
    "COUNT_MISMATCH",
    "ERROR_MESSAGE",
    "IS_EMPTY",
    "CollectionInputFilter",
    "FilterChain",
    "Input",
    "InputFilter",
    "ValidationNode",
    "ValidatorChain",
    "is_empty",
    "parse_ingress",
    "Factory",
    "FilterRegistry",
    "InputFilterRegistry",
    "ValidatorRegistry",
    "AppError",
    "AppErrorException",
    "ConfigurationError",
    "Err",
    "Ok",
    "Result",
]
