from __future__ import annotations

import logging

import pytest

from sqlpaginate import (
    ConfigurationError,
    InnerJoin,
    Paginator,
    PredicateError,
    RawWhereClause,
    SchemaValidationError,
    UnsupportedDialectError,
    desc,
)
from tests.models import Developer, Employee, NoId, Person, System

PAGE_SIZE = 30


def test_equality_filter_drops_redundant_id_sort() -> None:
    paginator = Paginator(Person, "postgres", "?name=Ringo&sort=-id", table_name="employees")

    sql, args = paginator.paginate()

    assert sql == (
        "SELECT id, name, last_name, count(*) over() FROM employees "
        "WHERE name = $1 ORDER BY id LIMIT 30 OFFSET 0"
    )
    assert args == ["Ringo"]


def test_single_inequality_stays_inequality() -> None:
    sql, args = Paginator(Employee, "postgres", "?salary<>4455", table_name="employees").paginate()

    assert " WHERE salary <> $1 ORDER BY id" in sql
    assert args == ["4455"]


def test_repeated_equality_collapses_into_in() -> None:
    sql, args = Paginator(
        Employee, "postgres", "?salary=4455&salary=1200000", table_name="employees"
    ).paginate()

    assert " WHERE salary IN ($1,$2) ORDER BY id" in sql
    assert args == ["4455", "1200000"]


def test_sort_and_page_size_from_request() -> None:
    url = "http://localhost/systems?system=hipaca&sort=+name,-lastname&page_size=7"
    sql, args = Paginator(System, "postgres", url, table_name="systems").paginate()

    assert sql == (
        "SELECT id, system, name, lastname, count(*) over() FROM systems "
        "WHERE system = $1 ORDER BY name ASC,lastname DESC,id LIMIT 7 OFFSET 0"
    )
    assert args == ["hipaca"]


def test_join_with_raw_predicate() -> None:
    paginator = Paginator(Person, "postgres", "?sort=-id", table_name="employees")
    join = InnerJoin("postgres")
    join.on("id", "managers", "employee_id")
    raw = RawWhereClause("postgres")
    raw.add_predicate("name ILIKE ?")
    raw.add_arg("%a%")
    paginator.add_join_clause(join)
    paginator.add_where_clause(raw)

    sql, args = paginator.paginate()

    assert sql == (
        "SELECT id, name, last_name, count(*) over() FROM employees "
        "JOIN managers ON employees.id = managers.employee_id "
        "WHERE name ILIKE $1 ORDER BY id LIMIT 30 OFFSET 0"
    )
    assert args == ["%a%"]


def test_custom_request_parameter_name() -> None:
    sql, args = Paginator(Developer, "postgres", "?lg=Go", table_name="employees").paginate()

    assert " WHERE programming_language = $1 " in sql
    assert args == ["Go"]


def test_filters_and_raw_predicates_share_numbering() -> None:
    paginator = Paginator(
        Employee, "postgres", "?name=Ringo&salary>=4000&name=John&page=3&page_size=10",
        table_name="employees",
    )
    raw = RawWhereClause("postgres")
    raw.add_predicate("worker_number > ? OR null_bool = ?")
    raw.add_arg(2)
    raw.add_arg(True)
    paginator.add_where_clause(raw)

    sql, args = paginator.paginate()

    assert sql.endswith(
        " WHERE name IN ($1,$2) AND salary >= $3 AND (worker_number > $4 OR null_bool = $5)"
        " ORDER BY id LIMIT 10 OFFSET 20"
    )
    assert args == ["Ringo", "John", "4000", 2, True]


def test_mysql_dialect_uses_question_marks() -> None:
    sql, args = Paginator(
        Employee, "mysql", "?last_name<>Smith&last_name<>Gates", table_name="employees"
    ).paginate()

    assert " WHERE last_name NOT IN (?,?) " in sql
    assert args == ["Smith", "Gates"]


def test_paginate_is_deterministic() -> None:
    paginator = Paginator(Employee, "postgres", "?name=Ringo&sort=+salary")
    assert paginator.paginate() == paginator.paginate()


def test_table_name_defaults_to_snake_case_class_name() -> None:
    paginator = Paginator(Employee, "mysql")

    assert paginator.table == "employee"
    assert paginator.paginate()[0].startswith("SELECT id, name, last_name, worker_number, ")
    assert " FROM employee ORDER BY id LIMIT 30 OFFSET 0" in paginator.paginate()[0]


def test_page_size_option_overrides_request() -> None:
    paginator = Paginator(Person, "mysql", "?page=2&page_size=50", page_size=5)

    assert paginator.page_size == 5
    assert paginator.page_number == 2
    assert paginator.paginate()[0].endswith(" LIMIT 5 OFFSET 5")


def test_order_by_option_overrides_sort() -> None:
    paginator = Paginator(
        Employee, "mysql", "?sort=+name", order_by=[desc("salary"), desc("id"), desc("salary")]
    )
    assert " ORDER BY salary DESC,id LIMIT" in paginator.paginate()[0]


def test_default_page_size_comes_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAGINATE_PAGE_SIZE", "12")
    assert Paginator(Person, "mysql").page_size == 12


def test_unsupported_dialect_fails_before_introspection() -> None:
    with pytest.raises(UnsupportedDialectError):
        Paginator(NoId, "oracle")


def test_schema_errors_surface_from_constructor() -> None:
    with pytest.raises(SchemaValidationError):
        Paginator(NoId, "mysql")


@pytest.mark.parametrize(
    "options",
    [{"table_name": "   "}, {"page_size": 0}, {"page_size": -3}],
)
def test_invalid_options(options: dict) -> None:
    with pytest.raises(ConfigurationError):
        Paginator(Person, "mysql", **options)


def test_clauses_must_match_paginator_dialect() -> None:
    paginator = Paginator(Person, "mysql")
    raw = RawWhereClause("postgres")
    raw.add_predicate("name = ?")
    raw.add_arg("Ringo")

    with pytest.raises(PredicateError, match="does not match"):
        paginator.add_where_clause(raw)


def test_clauses_are_validated_when_attached() -> None:
    paginator = Paginator(Person, "mysql")

    with pytest.raises(PredicateError):
        paginator.add_where_clause(RawWhereClause("mysql"))
    with pytest.raises(PredicateError):
        paginator.add_join_clause(InnerJoin("mysql"))
    with pytest.raises(PredicateError, match="expected a InnerJoin"):
        paginator.add_join_clause(RawWhereClause("mysql"))  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "url, total, has_next, next_page, has_previous",
    [
        ("?page=1&page_size=10", 25, True, 2, False),
        ("?page=3&page_size=10", 25, False, 0, True),
        ("?page=2&page_size=10", 20, False, 0, True),
        ("?page=1&page_size=10", 0, False, 0, False),
    ],
)
def test_response(url: str, total: int, has_next: bool, next_page: int, has_previous: bool) -> None:
    paginator = Paginator(Person, "mysql", url)
    paginator.set_total_result(total)
    paginator.set_page_count(4)

    response = paginator.response()

    assert response.page_number == paginator.page_number
    assert response.has_next_page is has_next
    assert response.next_page_number == next_page
    assert response.has_previous_page is has_previous
    assert response.total_size == total
    assert response.page_count == 4


def test_paginate_logs_sql_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="sqlpaginate.paginator"):
        sql, _ = Paginator(Person, "postgres", "?name=Ringo").paginate()

    record = next(r for r in caplog.records if r.message == "built paginated query")
    assert record.sql == sql
    assert record.arg_count == 1
    assert record.dialect == "postgres"


def test_attached_clauses_are_snapshots() -> None:
    paginator = Paginator(Person, "postgres", table_name="employees")
    raw = RawWhereClause("postgres")
    raw.add_predicate("name = ?")
    raw.add_arg("Ringo")
    join = InnerJoin("postgres")
    join.on("id", "managers", "employee_id")
    paginator.add_where_clause(raw)
    paginator.add_join_clause(join)

    raw.add_arg("John")
    raw.add_predicate("name = ? OR name = ?")
    join.on("id", "developer", "employee_id")

    sql, args = paginator.paginate()

    assert sql == (
        "SELECT id, name, last_name, count(*) over() FROM employees "
        "JOIN managers ON employees.id = managers.employee_id "
        "WHERE name = $1 ORDER BY id LIMIT 30 OFFSET 0"
    )
    assert args == ["Ringo"]


def test_invalid_page_size_setting_is_a_configuration_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("PAGINATE_PAGE_SIZE", "0")

    with pytest.raises(ConfigurationError, match="PAGINATE_PAGE_SIZE"):
        Paginator(Person, "mysql")
