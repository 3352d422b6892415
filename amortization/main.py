"""Command‑line interface for the amortization calculator.

This module uses the ``click`` library to implement a multi‑command
interface around a database file: ``init`` creates the schema, ``create``
adds a loan and stores its schedule, ``regenerate`` rebuilds a stored
schedule and ``show`` lists loans or prints one loan's schedule, optionally
exporting it to JSON/CSV.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Iterator, Optional

import click

from .config import database_url
from .data_models import Loan
from .engine import summarize
from .exceptions import AmortizationError
from .formatter import export_to_csv, export_to_json, print_loan, print_schedule, print_summary
from .logging_config import configure_logging
from .money import from_minor_units, round_money, to_decimal
from .report import ReportFacade
from .service import create_loan, regenerate_schedule
from .store import Database, LoanRepository, ScheduleRepository
from .utils import parse_amount, parse_date


def build_loan_from_options(
    name: str,
    apr: str,
    balance: str,
    term: int,
    start: Optional[str],
    minor_units: bool = False,
) -> Loan:
    """Turn raw option values into a ``Loan``; bad input raises ``BadParameter``."""
    try:
        apr_value = to_decimal(apr)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--apr")
    try:
        balance_value = parse_amount(balance)
        if minor_units:
            balance_value = from_minor_units(balance_value)
        balance_value = round_money(balance_value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--balance")
    if start:
        try:
            start_date = parse_date(start)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--start")
    else:
        start_date = date.today()
    return Loan(name=name, apr=apr_value, balance=balance_value, term=term, start_date=start_date)


@contextmanager
def open_database(db: str) -> Iterator[Database]:
    database = Database(database_url(db))
    try:
        yield database
    except AmortizationError as exc:
        raise click.ClickException(str(exc))
    finally:
        database.dispose()


@click.group()
@click.option(
    "--log-level",
    "log_level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level (defaults to $AMORTIZATION_LOG_LEVEL or WARNING)",
)
def cli(log_level: Optional[str]) -> None:
    """Calculates and stores fixed-rate amortization tables."""
    configure_logging(log_level)


@cli.command()
@click.argument("db")
def init(db: str) -> None:
    """Initialize the database."""
    with open_database(db) as database:
        database.initialize()
    click.echo(f"Initialized database {db}")


@cli.command()
@click.argument("db")
@click.argument("name")
@click.option("--apr", "-a", "apr", required=True, help="Annual percentage rate (percent, e.g. 3.75)")
@click.option("--balance", "-b", "balance", required=True, help="Original principal balance")
@click.option("--term", "-t", "term", required=True, type=int, help="Loan term in years")
@click.option("--start", "-s", "start", help="Loan start date (YYYY-MM-DD); defaults to today")
@click.option("--minor-units", is_flag=True, help="Interpret --balance in cents")
def create(db: str, name: str, apr: str, balance: str, term: int, start: Optional[str], minor_units: bool) -> None:
    """Create a new loan and store its amortization schedule."""
    loan = build_loan_from_options(name, apr, balance, term, start, minor_units)
    with open_database(db) as database:
        schedule = create_loan(database, loan)
    click.echo(f"Added loan {name} with {len(schedule)} payments")


@cli.command()
@click.argument("db")
@click.argument("name")
def regenerate(db: str, name: str) -> None:
    """Recompute and replace the stored schedule of a loan."""
    with open_database(db) as database:
        schedule = regenerate_schedule(database, name)
    click.echo(f"Regenerated {len(schedule)} payments for loan {name}")


@cli.command()
@click.argument("db")
@click.argument("name", required=False)
@click.option("-v", "verbosity", count=True, help="Show the payment summary (-v) and full schedule (-vv)")
@click.option("--output", "output", type=str, help="Export the schedule of NAME to a .json or .csv file")
def show(db: str, name: Optional[str], verbosity: int, output: Optional[str]) -> None:
    """List stored loans, or show a single loan's schedule."""
    if output and not name:
        raise click.UsageError("--output requires a loan NAME")
    with open_database(db) as database:
        facade = ReportFacade(LoanRepository(database), ScheduleRepository(database))
        if name:
            loan, schedule = facade.report(name)
            if output:
                path = Path(output)
                suffix = path.suffix.lower()
                if suffix not in (".json", ".csv"):
                    raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="--output")
                try:
                    if suffix == ".json":
                        export_to_json(path, loan, schedule)
                    else:
                        export_to_csv(path, schedule)
                except OSError as exc:
                    raise click.ClickException(f"Could not write {path}: {exc.strerror or exc}")
                click.echo(f"Schedule exported to {path}")
                return
            reports = [(loan, schedule)]
        else:
            reports = list(facade.reports())

    for loan, schedule in reports:
        print_loan(loan, schedule)
        if schedule is None or verbosity == 0:
            continue
        print_summary(summarize(loan, schedule))
        if verbosity > 1:
            print_schedule(schedule)


if __name__ == "__main__":
    cli()
