"""Shared fixtures for the amortization tests."""

from datetime import date
from decimal import Decimal

import pytest

from amortization.data_models import Loan
from amortization.store import Database, LoanRepository, ScheduleRepository, init_db


@pytest.fixture
def mortgage() -> Loan:
    """The 30-year reference mortgage: 3.75 % on 213,100 starting 2016-04-01."""
    return Loan(
        name="test",
        apr=Decimal("3.75"),
        balance=Decimal("213100"),
        term=30,
        start_date=date(2016, 4, 1),
    )


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'test.sqlite'}"


@pytest.fixture
def database(db_url):
    db = init_db(db_url)
    yield db
    db.dispose()


@pytest.fixture
def loans(database) -> LoanRepository:
    return LoanRepository(database)


@pytest.fixture
def schedules(database) -> ScheduleRepository:
    return ScheduleRepository(database)


@pytest.fixture
def uninitialized_database(db_url):
    db = Database(db_url)
    yield db
    db.dispose()
