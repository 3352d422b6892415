"""Decimal helpers for currency and rate values.

``Decimal`` itself supplies addition, subtraction and multiplication. This
module adds the one rounding policy used by every computation (round half up
to the minor currency unit) and guarded division.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext
from typing import Type, Union

from .exceptions import GenerationError, InvalidRate, InvalidTerm

getcontext().prec = 28  # increase precision for financial calculations

CENT = Decimal("0.01")
MONTHS_PER_YEAR = 12

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert ``value`` into a ``Decimal``.

    Strings may contain ``,`` thousands separators. Floats go through ``str``
    so that ``3.75`` becomes ``Decimal("3.75")`` rather than its binary
    approximation. Raises ``ValueError`` if conversion fails.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value: {value!r}")
    if isinstance(value, float):
        value = repr(value)
    try:
        result = Decimal(str(value).strip().replace(",", ""))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def round_money(value: Decimal) -> Decimal:
    """Round to the nearest cent, halves away from zero.

    Raises ``ValueError`` when the value has too many digits to be held to the
    cent at the working precision.
    """
    try:
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError(f"Amount out of range: {value}") from exc


def divide_money(
    numerator: Decimal,
    divisor: Union[Decimal, int],
    error: Type[GenerationError] = InvalidTerm,
) -> Decimal:
    """Divide and round the quotient to the minor unit.

    A zero or negative divisor raises ``error``.
    """
    if divisor <= 0:
        raise error(f"Divisor must be positive, got {divisor}", {"divisor": divisor})
    return round_money(numerator / Decimal(divisor))


def periodic_rate(apr: Decimal) -> Decimal:
    """Convert an annual percentage rate (3.75 == 3.75 %) to a monthly rate."""
    if apr < 0:
        raise InvalidRate(f"APR must not be negative, got {apr}", {"apr": apr})
    return apr / Decimal(100) / Decimal(MONTHS_PER_YEAR)


def from_minor_units(value: Number) -> Decimal:
    """Return the major-unit amount for an integral count of cents."""
    cents = to_decimal(value)
    if cents != cents.to_integral_value():
        raise ValueError(f"Minor units must be a whole number: {value}")
    return (cents * CENT).quantize(CENT)
