"""Data models for the amortization engine.

This module defines the two entities the engine works with: the loan
definition, which is immutable once created, and the period entries derived
from it. Using frozen dataclasses keeps both hashable and comparable, which
is what makes regenerated schedules easy to check for equality.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from .exceptions import InvalidBalance, InvalidTerm
from .money import MONTHS_PER_YEAR, periodic_rate, round_money, to_decimal


@dataclass(frozen=True)
class Loan:
    """A fixed-rate installment loan.

    Attributes
    ----------
    name: str
        Unique identifier of the loan.
    apr: Decimal
        Annual percentage rate in percent (``Decimal("3.75")`` is 3.75 %).
    balance: Decimal
        Original principal in major currency units, rounded to the cent.
    term: int
        Term in whole years.
    start_date: date
        Loan start. Payment ``k`` falls ``k`` months after this date, so its
        day of month determines every payment date.
    """

    name: str
    apr: Decimal
    balance: Decimal
    term: int
    start_date: date

    def __post_init__(self) -> None:
        object.__setattr__(self, "apr", to_decimal(self.apr))
        object.__setattr__(self, "balance", round_money(to_decimal(self.balance)))

    @property
    def periods(self) -> int:
        return self.term * MONTHS_PER_YEAR

    @property
    def periodic_rate(self) -> Decimal:
        return periodic_rate(self.apr)

    def validate(self) -> None:
        """Raise a ``GenerationError`` subclass if an invariant is violated."""
        # periodic_rate rejects a negative APR
        periodic_rate(self.apr)
        if self.balance <= 0:
            raise InvalidBalance(
                f"Balance must be positive, got {self.balance}",
                {"name": self.name, "balance": self.balance},
            )
        if isinstance(self.term, bool) or not isinstance(self.term, int) or self.term <= 0:
            raise InvalidTerm(
                f"Term must be a positive number of years, got {self.term}",
                {"name": self.name, "term": self.term},
            )


@dataclass(frozen=True)
class PeriodEntry:
    """One scheduled payment.

    ``principal + interest == payment`` holds exactly for every entry and
    ``remaining_balance`` is the balance left after the payment.
    """

    period: int
    payment_date: date
    payment: Decimal
    interest: Decimal
    principal: Decimal
    remaining_balance: Decimal
