"""Utility functions for the sell-my-house calculator.

This module turns raw user input (form fields, command-line arguments, stored
JSON values) into numbers the engine can work with, and validates the ranges
the engine itself never checks. Unparsable text becomes ``0`` rather than an
error; range violations raise :class:`InvalidInputError` with a message meant
for the user.
"""

from __future__ import annotations

import math
import re
from numbers import Real
from typing import Any
from uuid import uuid4

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")

CURRENCY_SYMBOLS = {
    "USD": "$",
    "AUD": "A$",
    "EUR": "€",
    "GBP": "£",
}


class InvalidInputError(ValueError):
    """Raised when user input is rejected; the message is shown to the user."""


def to_number(value: Any) -> float:
    """Convert ``value`` to a float, defaulting to ``0.0``.

    Real numbers are returned as-is when finite. Anything else is converted to
    text, stripped of every character other than digits, ``.`` and ``-``, and
    the longest leading decimal literal is parsed. For example ``"$1,250.50"``
    gives ``1250.5`` and ``"1.2.3"`` gives ``1.2``.
    """
    if isinstance(value, Real) and not isinstance(value, bool):
        number = float(value)
    else:
        cleaned = _NON_NUMERIC.sub("", "" if value is None else str(value))
        match = _LEADING_NUMBER.match(cleaned)
        if not match:
            return 0.0
        number = float(match.group(0))
    return number if math.isfinite(number) else 0.0


def validate_non_negative(value: Any, field_name: str) -> float:
    """Parse ``value`` and reject negative numbers."""
    number = to_number(value)
    if number < 0 or not math.isfinite(number):
        raise InvalidInputError(f"{field_name} must be a valid non-negative number.")
    return number


def validate_percentage(value: Any, field_name: str) -> float:
    """Parse ``value`` and reject anything outside 0-100."""
    number = to_number(value)
    if number < 0 or number > 100 or not math.isfinite(number):
        raise InvalidInputError(
            f"{field_name} must be a valid percentage between 0 and 100."
        )
    return number


def to_flag(value: Any) -> bool:
    """Interpret checkbox-like input ("on", "true", "1", "yes") as a boolean."""
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "on", "yes", "y")
    return bool(value)


def generate_offer_id() -> str:
    return uuid4().hex


def currency_to_symbol(code: str) -> str:
    return CURRENCY_SYMBOLS.get((code or "").upper(), "$")
