"""Tests for the command-line interface."""

import csv
import json
import logging

import pytest
from click.testing import CliRunner

from amortization.logging_config import PACKAGE_LOGGER
from amortization.main import cli

REFERENCE_LOAN = ["--apr", "3.75", "--balance", "213100", "--term", "30", "--start", "2016-04-01"]


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging.getLogger(PACKAGE_LOGGER).handlers.clear()


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def db(tmp_path, runner):
    path = str(tmp_path / "test.sqlite")
    result = runner.invoke(cli, ["init", path])
    assert result.exit_code == 0, result.output
    return path


def test_create_and_show(runner, db):
    result = runner.invoke(cli, ["create", db, "test", *REFERENCE_LOAN])
    assert result.exit_code == 0, result.output
    assert "360 payments" in result.output

    result = runner.invoke(cli, ["show", db, "test"])
    assert result.exit_code == 0, result.output
    assert "test: Balance = 213,100.00, APR = 3.75%" in result.output
    assert "Monthly payment" not in result.output


def test_show_verbosity_levels(runner, db):
    runner.invoke(cli, ["create", db, "test", *REFERENCE_LOAN])

    result = runner.invoke(cli, ["show", db, "test", "-v"])
    assert "Monthly payment" in result.output
    assert "2016-05-01" in result.output  # first payment in the summary
    assert "Period\tDate" not in result.output

    result = runner.invoke(cli, ["show", db, "test", "-vv"])
    lines = result.output.splitlines()
    assert "Period\tDate\tPayment\tPrincipal\tInterest\tBalance" in lines
    assert lines[-1].startswith("360\t2046-04-01\t")
    assert lines[-1].endswith("\t0.00")


def test_list_all_loans(runner, db):
    runner.invoke(cli, ["create", db, "house", *REFERENCE_LOAN])
    runner.invoke(cli, ["create", db, "car", "-a", "0", "-b", "12k", "-t", "1", "-s", "2020-01-31"])
    result = runner.invoke(cli, ["show", db])
    assert result.exit_code == 0, result.output
    assert "house: Balance = 213,100.00" in result.output
    assert "car: Balance = 12,000.00" in result.output


def test_duplicate_loan_fails(runner, db):
    runner.invoke(cli, ["create", db, "test", *REFERENCE_LOAN])
    result = runner.invoke(cli, ["create", db, "test", *REFERENCE_LOAN])
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_invalid_term_fails_before_writing(runner, db):
    result = runner.invoke(cli, ["create", db, "bad", "-a", "5", "-b", "1000", "-t", "0", "-s", "2020-01-01"])
    assert result.exit_code == 1
    result = runner.invoke(cli, ["show", db])
    assert "bad" not in result.output


def test_bad_date_is_usage_error(runner, db):
    result = runner.invoke(cli, ["create", db, "bad", "-a", "5", "-b", "1000", "-t", "1", "-s", "2020-02-30"])
    assert result.exit_code == 2


def test_minor_units(runner, db):
    result = runner.invoke(cli, ["create", db, "cents", "-a", "0", "-b", "120000", "-t", "1", "-s", "2020-01-01", "--minor-units"])
    assert result.exit_code == 0, result.output
    result = runner.invoke(cli, ["show", db, "cents", "-vv"])
    assert "cents: Balance = 1,200.00" in result.output
    assert "1\t2020-02-01\t100.00\t100.00\t0.00\t1100.00" in result.output.splitlines()


def test_uninitialized_database(runner, tmp_path):
    result = runner.invoke(cli, ["show", str(tmp_path / "empty.sqlite")])
    assert result.exit_code == 1
    assert "init" in result.output


def test_unknown_loan(runner, db):
    result = runner.invoke(cli, ["show", db, "ghost"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_regenerate(runner, db):
    runner.invoke(cli, ["create", db, "test", *REFERENCE_LOAN])
    result = runner.invoke(cli, ["regenerate", db, "test"])
    assert result.exit_code == 0, result.output
    assert "Regenerated 360 payments" in result.output


def test_export_json(runner, db, tmp_path):
    runner.invoke(cli, ["create", db, "test", *REFERENCE_LOAN])
    out = tmp_path / "schedule.json"
    result = runner.invoke(cli, ["show", db, "test", "--output", str(out)])
    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["loan"]["balance"] == "213100.00"
    assert len(data["schedule"]) == 360
    assert data["schedule"][0]["date"] == "2016-05-01"
    assert data["schedule"][0]["interest"] == "665.94"
    assert data["schedule"][-1]["remaining_balance"] == "0.00"


def test_export_csv(runner, db, tmp_path):
    runner.invoke(cli, ["create", db, "test", *REFERENCE_LOAN])
    out = tmp_path / "schedule.csv"
    result = runner.invoke(cli, ["show", db, "test", "--output", str(out)])
    assert result.exit_code == 0, result.output
    with out.open(newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["Period", "Date", "Payment", "Principal", "Interest", "Remaining_Balance"]
    assert len(rows) == 361


def test_export_rejects_unknown_format(runner, db, tmp_path):
    runner.invoke(cli, ["create", db, "test", *REFERENCE_LOAN])
    result = runner.invoke(cli, ["show", db, "test", "--output", str(tmp_path / "schedule.xlsx")])
    assert result.exit_code == 2


def test_apr_displayed_half_up(runner, db):
    runner.invoke(cli, ["create", db, "odd", "-a", "3.125", "-b", "1000", "-t", "1", "-s", "2020-01-01"])
    result = runner.invoke(cli, ["show", db, "odd"])
    assert result.exit_code == 0, result.output
    assert "APR = 3.13%" in result.output


def test_oversized_balance_is_usage_error(runner, db):
    result = runner.invoke(cli, ["create", db, "big", "-a", "5", "-b", "1e27", "-t", "1", "-s", "2020-01-01"])
    assert result.exit_code == 2
    assert "--balance" in result.output
    result = runner.invoke(cli, ["show", db])
    assert "big" not in result.output


def test_export_to_unwritable_path_fails_cleanly(runner, db, tmp_path):
    runner.invoke(cli, ["create", db, "test", *REFERENCE_LOAN])
    out = tmp_path / "missing" / "schedule.json"
    result = runner.invoke(cli, ["show", db, "test", "--output", str(out)])
    assert result.exit_code == 1
    assert "Could not write" in result.output
    assert not out.exists()
