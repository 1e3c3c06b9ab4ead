"""Stock filters and validators

Plain building blocks for FilterChain and ValidatorChain. Any callable works
as a filter and any AtomicValidator (or predicate) as a validator; these
cover the common cases and are what the Factory registers by default.
"""
from .validators import (
    ValidationResult,
    AtomicValidator,
    # String validators
    StringLength,
    NonEmpty,
    RegexPattern,
    OneOf,
    # Numeric validators
    NumericRange,
    Positive,
    # Format validators
    EmailValidator,
    UUIDValidator,
    DateTimeValidator,
    # Collection validators
    ListLength,
    # Context validators
    Identical,
    # Combinators
    And,
    Or,
    Not,
    WithMessage,
    # Custom validator
    CustomValidator,
    custom,
)

from .filters import (
    trim,
    lower,
    upper,
    title,
    normalize_whitespace,
    strip_control_chars,
    StringTrim,
    ToNull,
    CoercionRule,
    StringToInt,
    StringToFloat,
    StringToDecimal,
    StringToBool,
    ISO8601ToDateTime,
    StringToUUID,
)

__all__ = [
    "ValidationResult",
    "AtomicValidator",
    "StringLength",
    "NonEmpty",
    "RegexPattern",
    "OneOf",
    "NumericRange",
    "Positive",
    "EmailValidator",
    "UUIDValidator",
    "DateTimeValidator",
    "ListLength",
    "Identical",
    "And",
    "Or",
    "Not",
    "WithMessage",
    "CustomValidator",
    "custom",
    "trim",
    "lower",
    "upper",
    "title",
    "normalize_whitespace",
    "strip_control_chars",
    "StringTrim",
    "ToNull",
    "CoercionRule",
    "StringToInt",
    "StringToFloat",
    "StringToDecimal",
    "StringToBool",
    "ISO8601ToDateTime",
    "StringToUUID",
]
