"""Shared fixtures for the inputfilter test-suite."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from inputfilter import Input, InputFilter
from inputfilter.validation import CustomValidator, StringLength, StringTrim


@pytest.fixture
def make_spy():
    """Return a factory of validators backed by a MagicMock so call counts can be asserted."""

    def _make(result: bool = True, name: str = "spy", takes_context: bool = False):
        fn = MagicMock(return_value=result)
        return CustomValidator(fn, name=name, message=f"{name} failed", takes_context=takes_context), fn

    return _make


@pytest.fixture
def username_filter() -> InputFilter:
    return InputFilter({
        "username": Input(filters=[StringTrim()], validators=[StringLength(min_length=3)]),
    })
