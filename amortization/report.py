"""Read-side composition of stored loans and schedules for display."""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from .data_models import Loan, PeriodEntry
from .store import LoanRepository, ScheduleRepository


class ReportFacade:
    """Reads a loan together with its stored schedule.

    No computation happens here; ``NotFound`` from either repository is
    propagated unchanged.
    """

    def __init__(self, loans: LoanRepository, schedules: ScheduleRepository) -> None:
        self._loans = loans
        self._schedules = schedules

    def report(self, name: str) -> Tuple[Loan, List[PeriodEntry]]:
        loan = self._loans.get(name)
        return loan, self._schedules.list(name)

    def reports(self) -> Iterator[Tuple[Loan, Optional[List[PeriodEntry]]]]:
        """Yield every loan with its schedule, or ``None`` if none is stored yet."""
        for loan in self._loans.all():
            if self._schedules.exists(loan.name):
                yield loan, self._schedules.list(loan.name)
            else:
                yield loan, None
