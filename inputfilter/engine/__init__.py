"""Validation engine: chains, nodes and the tree walk that ties them together."""
from .empty import MISSING, is_empty, is_missing
from .filter_chain import FilterChain
from .validator_chain import ValidatorChain
from .node import VALIDATE_ALL, ValidationNode
from .input import ERROR_MESSAGE, IS_EMPTY, Input
from .input_filter import InputFilter
from .collection import COUNT_MISMATCH, CollectionInputFilter
from .boundaries import parse_ingress

__all__ = [
    "MISSING",
    "is_empty",
    "is_missing",
    "FilterChain",
    "ValidatorChain",
    "VALIDATE_ALL",
    "ValidationNode",
    "ERROR_MESSAGE",
    "IS_EMPTY",
    "Input",
    "InputFilter",
    "COUNT_MISMATCH",
    "CollectionInputFilter",
    "parse_ingress",
]
