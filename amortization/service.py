"""Operations that combine the engine with the repositories.

``create_loan`` validates by generating the schedule before anything is
written, then stores the loan and its schedule. If the process stops between
the two writes the loan simply has no schedule yet, and
``regenerate_schedule`` rebuilds it from the stored definition.
"""

from __future__ import annotations

from typing import List

from .data_models import Loan, PeriodEntry
from .engine import generate
from .logging_config import get_logger
from .store import Database, LoanRepository, ScheduleRepository

logger = get_logger(__name__)


def create_loan(database: Database, loan: Loan) -> List[PeriodEntry]:
    """Store ``loan`` and its freshly generated schedule."""
    schedule = generate(loan)
    LoanRepository(database).create(loan)
    ScheduleRepository(database).replace(loan.name, schedule)
    return schedule


def regenerate_schedule(database: Database, name: str) -> List[PeriodEntry]:
    """Recompute the schedule of a stored loan and replace the stored one."""
    loan = LoanRepository(database).get(name)
    schedule = generate(loan)
    ScheduleRepository(database).replace(name, schedule)
    logger.info("Regenerated schedule for loan %s", name)
    return schedule
