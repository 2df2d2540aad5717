from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from sqlpaginate import main

runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main, "configure_logging", lambda **_: None)


def test_sql_prints_statement_and_args() -> None:
    result = runner.invoke(
        main.app,
        ["sql", "tests.models:Person", "--url", "?name=Ringo&name=John", "--table", "employees"],
    )

    assert result.exit_code == 0, result.output
    statement, args = result.stdout.strip().splitlines()
    assert statement == (
        "SELECT id, name, last_name, count(*) over() FROM employees "
        "WHERE name IN ($1,$2) ORDER BY id LIMIT 30 OFFSET 0"
    )
    assert json.loads(args) == ["Ringo", "John"]


def test_sql_mysql_dialect_and_page_size() -> None:
    result = runner.invoke(
        main.app,
        ["sql", "tests.models:Person", "-d", "mysql", "-u", "?name=Ringo&page=2", "-p", "5"],
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines()[0].endswith("WHERE name = ? ORDER BY id LIMIT 5 OFFSET 5")


def test_sql_reports_paginate_errors() -> None:
    result = runner.invoke(main.app, ["sql", "tests.models:NoId"])

    assert result.exit_code == 1
    assert "paginate: NoId has no field tagged as id" in result.output


@pytest.mark.parametrize("record", ["tests.models", "tests.nowhere:Person", "tests.models:Nobody"])
def test_sql_rejects_bad_record_paths(record: str) -> None:
    result = runner.invoke(main.app, ["sql", record])
    assert result.exit_code == 2


def test_info_prints_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAGINATE_PAGE_SIZE", "15")
    result = runner.invoke(main.app, ["info"])

    assert result.exit_code == 0
    assert "page_size=15" in result.stdout
