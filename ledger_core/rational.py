"""Exact conversion between decimal text and :class:`fractions.Fraction`."""

from __future__ import annotations

import re
from fractions import Fraction
from typing import Union

from .exceptions import (
    EmptyInputError,
    InvalidDenominatorError,
    InvalidNumeratorError,
    RationalParseError,
)

__all__ = ["ZERO", "coerce_rational", "format_rational", "parse_rational"]

ZERO = Fraction(0)

INTEGER_PATTERN = re.compile(r"^[+-]?[0-9]+$")
DIGITS_PATTERN = re.compile(r"^[0-9]+$")

RationalLike = Union[Fraction, int, str]


def parse_rational(text: object) -> Fraction:
    """Parse ``[+|-]<int>[.<digits>]`` into an exact fraction.

    The sign applies to the whole value, so ``"-1.05"`` is ``-21/20``.
    """
    if text is None:
        raise EmptyInputError(text)
    if not isinstance(text, str):
        raise RationalParseError(text, "expected a decimal string")
    stripped = text.strip()
    if not stripped:
        raise EmptyInputError(text)

    integral, dot, fractional = stripped.partition(".")
    if not integral:
        raise EmptyInputError(text)
    if not INTEGER_PATTERN.fullmatch(integral):
        raise InvalidNumeratorError(text, integral)

    negative = integral.startswith("-")
    value = Fraction(abs(int(integral)))
    if dot:
        if not DIGITS_PATTERN.fullmatch(fractional):
            raise InvalidDenominatorError(text, fractional)
        value += Fraction(int(fractional), 10 ** len(fractional))
    return -value if negative else value


def format_rational(value: RationalLike, max_decimals: int = 2) -> str:
    """Render ``value`` as decimal text with at most ``max_decimals`` digits.

    Rounds half away from zero and strips trailing zero digits.
    """
    if max_decimals < 0:
        raise ValueError("max_decimals must not be negative")
    value = coerce_rational(value)
    if value.denominator == 1:
        return str(value.numerator)

    magnitude = abs(value)
    integral = magnitude.numerator // magnitude.denominator
    scale = 10 ** max_decimals
    scaled = (magnitude - integral) * scale
    digits = scaled.numerator // scaled.denominator
    if scaled - digits >= Fraction(1, 2):
        digits += 1
    if digits == scale:
        integral += 1
        digits = 0

    decimals = max_decimals
    while decimals and digits % 10 == 0:
        digits //= 10
        decimals -= 1

    sign = "-" if value < 0 and (integral or digits) else ""
    if not decimals:
        return f"{sign}{integral}"
    return f"{sign}{integral}.{digits:0{decimals}d}"


def coerce_rational(value: object) -> Fraction:
    """Accept a Fraction, an int or decimal text; reject floats and bools."""
    if isinstance(value, bool):
        raise RationalParseError(value, "booleans are not numbers")
    if isinstance(value, Fraction):
        return value
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, str) or value is None:
        return parse_rational(value)
    raise RationalParseError(value, f"unsupported type {type(value).__name__}")
