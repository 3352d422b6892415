"""Utility functions for the amortization engine.

This module provides helpers for parsing user input into Python data types
and for calendar arithmetic. Payment dates are derived with ``add_months``,
which moves by whole calendar months and clamps the day of month instead of
counting days, so month lengths and leap years never cause drift.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime
from decimal import Decimal

from .money import to_decimal

_SUFFIXES = {"k": Decimal(1_000), "m": Decimal(1_000_000)}


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string into a ``date``.

    Raises
    ------
    ValueError
        If the string is not a valid calendar date.
    """
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Invalid date (expected YYYY-MM-DD): {value}") from exc


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("213100", "213,100.50") and shorthand with
    ``k``/``m`` suffixes (e.g., "500k" meaning 500_000).
    """
    cleaned = value.strip().lower()
    factor = Decimal(1)
    if cleaned[-1:] in _SUFFIXES:
        factor = _SUFFIXES[cleaned[-1]]
        cleaned = cleaned[:-1]
    return to_decimal(cleaned) * factor
