"""Output helpers for stored loans and schedules.

This module renders loans, summaries and amortization schedules as plain
text, and exports schedules to JSON or CSV files. Amounts are formatted from
``Decimal`` directly; JSON exports carry them as decimal strings so no binary
floating-point rounding sneaks into exported files.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .data_models import Loan, PeriodEntry
from .money import round_money


def print_loan(loan: Loan, schedule: Optional[Sequence[PeriodEntry]] = None) -> None:
    """Print the one-line description of a loan."""
    line = (
        f"{loan.name}: Balance = {loan.balance:,.2f}, APR = {round_money(loan.apr):.2f}%, "
        f"Term = {loan.term} years, Start = {loan.start_date.isoformat()}"
    )
    if schedule is None:
        line += " (no schedule stored)"
    print(line)


def print_summary(summary: Dict[str, Any]) -> None:
    """Print a summary of loan metrics in a human‑readable format."""
    print("-" * 72)
    print(f"Monthly payment    : {summary['monthly_payment']:,.2f}")
    print(f"Payments           : {summary['payments']}")
    print(f"Total interest     : {summary['total_interest']:,.2f}")
    print(f"Total paid         : {summary['total_paid']:,.2f}")
    if summary.get("first_payment_date"):
        print(f"First payment      : {summary['first_payment_date'].isoformat()}")
        print(f"Final payment      : {summary['final_payment']:,.2f} on {summary['final_payment_date'].isoformat()}")
    print("-" * 72)


def print_schedule(schedule: Iterable[PeriodEntry]) -> None:
    """Print the amortization schedule as a simple tab-separated table."""
    headers = ["Period", "Date", "Payment", "Principal", "Interest", "Balance"]
    print("\t".join(headers))
    for entry in schedule:
        row = [
            str(entry.period),
            entry.payment_date.isoformat(),
            f"{entry.payment:.2f}",
            f"{entry.principal:.2f}",
            f"{entry.interest:.2f}",
            f"{entry.remaining_balance:.2f}",
        ]
        print("\t".join(row))


def _entry_to_dict(entry: PeriodEntry) -> Dict[str, Any]:
    return {
        "period": entry.period,
        "date": entry.payment_date.isoformat(),
        "payment": str(entry.payment),
        "principal": str(entry.principal),
        "interest": str(entry.interest),
        "remaining_balance": str(entry.remaining_balance),
    }


def export_to_json(path: Path, loan: Loan, schedule: List[PeriodEntry]) -> None:
    """Export a loan and its schedule to a JSON file."""
    data = {
        "loan": {
            "name": loan.name,
            "apr": str(loan.apr),
            "balance": str(loan.balance),
            "term": loan.term,
            "start_date": loan.start_date.isoformat(),
        },
        "schedule": [_entry_to_dict(e) for e in schedule],
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: List[PeriodEntry]) -> None:
    """Export a schedule to a CSV file."""
    header = ["Period", "Date", "Payment", "Principal", "Interest", "Remaining_Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for e in schedule:
            writer.writerow(
                [
                    e.period,
                    e.payment_date.isoformat(),
                    str(e.payment),
                    str(e.principal),
                    str(e.interest),
                    str(e.remaining_balance),
                ]
            )
