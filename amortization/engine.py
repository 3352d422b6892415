"""Core calculation engine for fixed-rate amortization schedules.

The engine turns a ``Loan`` into its ordered list of ``PeriodEntry`` objects.
Every amount is rounded to the cent when it is computed: the level payment
once, and each period's interest from the remaining balance. Rounding drift
is never carried forward in higher precision; instead the final period pays
off whatever balance remains, so the schedule always ends at exactly zero.

The engine performs no I/O and is deterministic, which is what lets stored
schedules be regenerated and replaced wholesale.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Sequence

from .data_models import Loan, PeriodEntry
from .exceptions import InvalidRate
from .logging_config import get_logger
from .money import divide_money, round_money
from .utils import add_months

logger = get_logger(__name__)

ZERO = Decimal("0.00")


def _calculate_annuity_payment(principal: Decimal, rate_per_month: Decimal, term: int) -> Decimal:
    """Return the level monthly payment, rounded to the cent.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.
    """
    factor = (1 + rate_per_month) ** term
    # A rate too small to move the factor at working precision amortizes straight-line.
    if rate_per_month == 0 or factor == 1:
        return divide_money(principal, term)
    return divide_money(principal * rate_per_month * factor, factor - 1, error=InvalidRate)


def level_payment(loan: Loan) -> Decimal:
    """Return the level monthly payment for ``loan``."""
    loan.validate()
    return _calculate_annuity_payment(loan.balance, loan.periodic_rate, loan.periods)


def generate(loan: Loan) -> List[PeriodEntry]:
    """Compute the amortization schedule for a loan.

    Parameters
    ----------
    loan: Loan
        The loan definition. It is validated first; an invalid loan raises
        ``InvalidRate``, ``InvalidBalance`` or ``InvalidTerm``.

    Returns
    -------
    List[PeriodEntry]
        One entry per month, periods ``1..term * 12``. The last entry's
        remaining balance is exactly zero.
    """
    loan.validate()
    rate_per_month = loan.periodic_rate
    total_periods = loan.periods
    payment = _calculate_annuity_payment(loan.balance, rate_per_month, total_periods)

    schedule: List[PeriodEntry] = []
    remaining = loan.balance
    for period in range(1, total_periods + 1):
        interest = round_money(remaining * rate_per_month)
        if period == total_periods:
            # Final period clears the balance exactly, absorbing rounding drift.
            principal = remaining
        else:
            principal = min(max(payment - interest, ZERO), remaining)
        remaining -= principal
        schedule.append(
            PeriodEntry(
                period=period,
                payment_date=add_months(loan.start_date, period),
                payment=principal + interest,
                interest=interest,
                principal=principal,
                remaining_balance=remaining,
            )
        )

    logger.debug(
        "Generated %d periods for loan %s (payment %s, final payment %s)",
        total_periods,
        loan.name,
        payment,
        schedule[-1].payment,
    )
    return schedule


def summarize(loan: Loan, schedule: Sequence[PeriodEntry]) -> Dict[str, object]:
    """Return aggregate metrics for a loan and its schedule.

    Amounts stay ``Decimal`` so callers decide how to render them.
    """
    total_interest = sum((e.interest for e in schedule), ZERO)
    total_principal = sum((e.principal for e in schedule), ZERO)
    return {
        "name": loan.name,
        "balance": loan.balance,
        "apr": loan.apr,
        "monthly_payment": level_payment(loan),
        "payments": len(schedule),
        "total_interest": total_interest,
        "total_principal": total_principal,
        "total_paid": total_interest + total_principal,
        "first_payment_date": schedule[0].payment_date if schedule else None,
        "final_payment_date": schedule[-1].payment_date if schedule else None,
        "final_payment": schedule[-1].payment if schedule else None,
    }
