"""Persistence layer for loans and their amortization schedules.

Loans and schedule entries live in a relational store reached through
SQLAlchemy. It defaults to a SQLite file, but accepts any
SQLAlchemy-compatible URL. Loans are append-only records; a schedule is a
derived artifact that is only ever replaced as a whole, inside a single
transaction, so a failed regeneration leaves the previous schedule intact.

Decimal amounts are stored as their exact decimal text, so a regenerated
schedule is stored byte for byte identical to the one it replaces.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    create_engine,
    delete,
    event,
    inspect,
    select,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.types import TypeDecorator

from .data_models import Loan, PeriodEntry
from .exceptions import DuplicateLoan, NotFound, SchemaNotInitialized, StorageFailure
from .logging_config import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class DecimalText(TypeDecorator):
    """Stores ``Decimal`` values as text so no precision is lost."""

    impl = String(64)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


class LoanModel(Base):
    __tablename__ = "loans"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    apr = Column(DecimalText, nullable=False)
    balance = Column(DecimalText, nullable=False)
    term = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    @classmethod
    def from_loan(cls, loan: Loan) -> "LoanModel":
        return cls(
            name=loan.name,
            apr=loan.apr,
            balance=loan.balance,
            term=loan.term,
            start_date=loan.start_date,
        )

    def to_loan(self) -> Loan:
        return Loan(
            name=self.name,
            apr=self.apr,
            balance=self.balance,
            term=self.term,
            start_date=self.start_date,
        )


class ScheduleEntryModel(Base):
    __tablename__ = "schedule_entries"
    __table_args__ = (UniqueConstraint("loan_name", "period_index", name="uq_schedule_period"),)

    id = Column(Integer, primary_key=True)
    loan_name = Column(String(255), ForeignKey("loans.name"), index=True, nullable=False)
    period_index = Column(Integer, nullable=False)
    payment_date = Column(Date, nullable=False)
    payment_amount = Column(DecimalText, nullable=False)
    interest_portion = Column(DecimalText, nullable=False)
    principal_portion = Column(DecimalText, nullable=False)
    remaining_balance = Column(DecimalText, nullable=False)

    @classmethod
    def from_entry(cls, loan_name: str, entry: PeriodEntry) -> "ScheduleEntryModel":
        return cls(
            loan_name=loan_name,
            period_index=entry.period,
            payment_date=entry.payment_date,
            payment_amount=entry.payment,
            interest_portion=entry.interest,
            principal_portion=entry.principal,
            remaining_balance=entry.remaining_balance,
        )

    def to_entry(self) -> PeriodEntry:
        return PeriodEntry(
            period=self.period_index,
            payment_date=self.payment_date,
            payment=self.payment_amount,
            interest=self.interest_portion,
            principal=self.principal_portion,
            remaining_balance=self.remaining_balance,
        )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and hands out sessions once the schema exists."""

    def __init__(self, url: str) -> None:
        self.url = url
        self._engine = create_engine(url, future=True)
        if self._engine.dialect.name == "sqlite":
            event.listen(self._engine, "connect", _enable_sqlite_foreign_keys)
        self._session_factory = sessionmaker(self._engine, expire_on_commit=False, future=True)
        self._initialized = False

    def initialize(self) -> None:
        """Create the schema. Safe to call on an initialised database."""
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            logger.error("Error creating database %s: %s", self.url, exc)
            raise StorageFailure(f"Could not initialise database: {exc}", {"url": self.url}) from exc
        self._initialized = True
        logger.info("Database successfully created: %s", self.url)

    def is_initialized(self) -> bool:
        if self._initialized:
            return True
        try:
            inspector = inspect(self._engine)
            self._initialized = all(inspector.has_table(name) for name in Base.metadata.tables)
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Could not open database: {exc}", {"url": self.url}) from exc
        return self._initialized

    def session(self) -> Session:
        if not self.is_initialized():
            raise SchemaNotInitialized(
                "Database has not been initialised; run 'init' first", {"url": self.url}
            )
        return self._session_factory()

    def dispose(self) -> None:
        self._engine.dispose()


def init_db(url: str) -> Database:
    """Create the schema at ``url`` and return the opened database."""
    database = Database(url)
    database.initialize()
    return database


class LoanRepository:
    """Append-only store of loan definitions."""

    def __init__(self, database: Database) -> None:
        self._database = database

    def create(self, loan: Loan) -> None:
        """Persist ``loan``; raises ``DuplicateLoan`` if the name is taken."""
        try:
            with self._database.session() as session, session.begin():
                if _loan_id(session, loan.name) is not None:
                    raise DuplicateLoan(loan.name)
                session.add(LoanModel.from_loan(loan))
        except IntegrityError as exc:
            raise DuplicateLoan(loan.name) from exc
        except SQLAlchemyError as exc:
            logger.error("Error adding loan %s: %s", loan.name, exc)
            raise StorageFailure(f"Could not store loan: {exc}", {"name": loan.name}) from exc
        logger.info("Added loan: %s", loan.name)

    def get(self, name: str) -> Loan:
        try:
            with self._database.session() as session:
                row = session.execute(
                    select(LoanModel).where(LoanModel.name == name)
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Could not read loan: {exc}", {"name": name}) from exc
        if row is None:
            raise NotFound(name)
        return row.to_loan()

    def exists(self, name: str) -> bool:
        try:
            with self._database.session() as session:
                return _loan_id(session, name) is not None
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Could not read loan: {exc}", {"name": name}) from exc

    def all(self) -> List[Loan]:
        """Return every loan in creation order."""
        try:
            with self._database.session() as session:
                rows: Iterable[LoanModel] = session.execute(
                    select(LoanModel).order_by(LoanModel.id.asc())
                ).scalars()
                return [row.to_loan() for row in rows]
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Could not list loans: {exc}") from exc


class ScheduleRepository:
    """Stores generated schedules, replacing them as a unit."""

    def __init__(self, database: Database) -> None:
        self._database = database

    def replace(self, name: str, entries: Iterable[PeriodEntry]) -> None:
        """Atomically swap the stored schedule of ``name`` for ``entries``."""
        rows = [ScheduleEntryModel.from_entry(name, entry) for entry in entries]
        try:
            with self._database.session() as session, session.begin():
                if _loan_id(session, name) is None:
                    raise NotFound(name)
                session.execute(delete(ScheduleEntryModel).where(ScheduleEntryModel.loan_name == name))
                session.add_all(rows)
        except SQLAlchemyError as exc:
            logger.error("Error replacing schedule for %s: %s", name, exc)
            raise StorageFailure(f"Could not store schedule: {exc}", {"name": name}) from exc
        logger.info("Stored %d schedule entries for loan %s", len(rows), name)

    def list(self, name: str) -> List[PeriodEntry]:
        try:
            with self._database.session() as session:
                rows = session.execute(
                    select(ScheduleEntryModel)
                    .where(ScheduleEntryModel.loan_name == name)
                    .order_by(ScheduleEntryModel.period_index.asc())
                ).scalars().all()
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Could not read schedule: {exc}", {"name": name}) from exc
        if not rows:
            raise NotFound(name, what="Schedule for loan")
        return [row.to_entry() for row in rows]

    def exists(self, name: str) -> bool:
        try:
            with self._database.session() as session:
                row = session.execute(
                    select(ScheduleEntryModel.id).where(ScheduleEntryModel.loan_name == name).limit(1)
                ).first()
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Could not read schedule: {exc}", {"name": name}) from exc
        return row is not None


def _loan_id(session: Session, name: str) -> Optional[int]:
    return session.execute(select(LoanModel.id).where(LoanModel.name == name)).scalar_one_or_none()
