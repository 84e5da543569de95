"""Utility helpers for calculator modules."""

from __future__ import annotations

import re
import sys
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_UNIT = Decimal(1)
_HUNDRED = Decimal(100)
# Largest magnitude a browser number field accepts before reading Infinity.
_MAX_AMOUNT = Decimal(repr(sys.float_info.max))


def _is_usable(number: Decimal) -> bool:
    return number.is_finite() and abs(number) <= _MAX_AMOUNT


def parse_amount(value: Any) -> Decimal | None:
    """Parse a form value into a finite ``Decimal``.

    Text is read the way a browser number field is: leading whitespace is
    skipped and the longest numeric prefix wins, so ``"300abc"`` is 300.
    Blank, non-numeric, and non-finite values return ``None``; magnitudes
    beyond double precision count as non-finite.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if _is_usable(value) else None
    if isinstance(value, (int, float)):
        return parse_amount(str(value))
    if not isinstance(value, str):
        return None

    match = _LEADING_NUMBER.match(value.strip())
    if match is None:
        return None
    try:
        number = Decimal(match.group(0))
    except InvalidOperation:  # pragma: no cover - regex guarantees syntax
        return None
    return number if _is_usable(number) else None


def parse_amount_or_zero(value: Any) -> Decimal:
    """Lenient variant used for optional line items."""

    number = parse_amount(value)
    return number if number is not None else Decimal(0)


def quantize_to(value: Decimal, exponent: Decimal, rounding: str) -> Decimal:
    """Quantize with enough working precision to keep every integer digit."""

    with localcontext() as context:
        needed = value.adjusted() - exponent.as_tuple().exponent + 2
        context.prec = max(context.prec, needed)
        return value.quantize(exponent, rounding=rounding)


def round_currency(value: Decimal) -> Decimal:
    """Round to whole currency units, halves away from zero."""

    return quantize_to(value, _UNIT, ROUND_HALF_UP)


def floor_currency(value: Decimal) -> Decimal:
    return quantize_to(value, _UNIT, ROUND_FLOOR)


def percent_of(amount: Decimal, rate_percent: Decimal) -> Decimal:
    """Return ``rate_percent`` percent of ``amount`` without rounding."""

    return amount * rate_percent / _HUNDRED


def format_percentage(value: Decimal) -> str:
    """Return a human-readable label for a percentage value such as ``12.5``."""

    if value == value.to_integral_value():
        return f"{int(value)}%"
    return f"{value.normalize():f}%"


__all__ = [
    "floor_currency",
    "format_percentage",
    "parse_amount",
    "parse_amount_or_zero",
    "percent_of",
    "quantize_to",
    "round_currency",
]
