"""Validation at System Boundaries

One-call helpers for callers (HTTP handlers, CLIs, jobs) that want a Result
instead of driving set_data/is_valid/get_messages themselves.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from inputfilter.core.errors import AppError, AppErrorException, Err, Ok, Result, input_filter_invalid

from .input_filter import InputFilter


def parse_ingress(
    input_filter: InputFilter,
    data: Mapping[str, Any],
    context: Any = None,
) -> Result[dict[str, Any], AppError]:
    """Validate incoming data. Ok carries the filtered values; Err carries the
    message tree and any unknown keys in its metadata."""
    try:
        input_filter.set_data(data)
        valid = input_filter.is_valid(context)
    except AppErrorException as e:
        return Err(e.error.with_origin("ingress"))
    if not valid:
        return input_filter_invalid(input_filter.get_messages(), unknown=input_filter.get_unknown(), origin="ingress")
    return Ok(input_filter.get_values())
