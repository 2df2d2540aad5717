"""
Create and seed the tables used by the integration tests and examples.

Builds an ``employees`` table plus two join targets (``managers`` and
``developer``) with a small, fixed data set. Works against PostgreSQL through
psycopg, or against any DB-API connection (sqlite3 in the unit tests) through
``seed_connection``.
"""

from __future__ import annotations

import sys
from datetime import datetime, timedelta
from typing import Any, List, Optional, Sequence, Tuple

import psycopg
import typer

from sqlpaginate.infrastructure.db_factory import build_dsn

app = typer.Typer(help="Create and seed the employees test tables.")

JOINED = datetime(2021, 3, 1, 9, 30)

# (name, last_name, worker_number, date_joined, salary, null_bool)
EMPLOYEES: List[Tuple[str, str, int, datetime, float, Optional[bool]]] = [
    ("Ringo", "Star", 1, JOINED, 5400, None),
    ("Bill", "Gates", 2, JOINED + timedelta(days=1), 1200000, True),
    ("Mark", "Smith", 3, JOINED + timedelta(days=2), 8000, None),
    ("John", "Smith", 4, JOINED + timedelta(days=3), 4650.90, None),
    ("Fred", "Smith", 5, JOINED + timedelta(days=4), 7550, True),
    ("Rob", "Williams", 6, JOINED + timedelta(days=5), 9880, None),
    ("Juliana", "Collier", 7, JOINED + timedelta(days=6), 7788, None),
    ("Erika", "Smith", 8, JOINED + timedelta(days=7), 4455, None),
    ("Maria", "Gomez", 9, JOINED + timedelta(days=8), 7550, None),
    ("Rafael", "Smith", 10, JOINED + timedelta(days=9), 7550, None),
]

# employee ids 6..10 are managers
MANAGER_IDS = [6, 7, 8, 9, 10]

# (employee_id, programming_language)
DEVELOPERS = [(1, "Go"), (2, "Go"), (3, "Go"), (4, "Python"), (5, "Python")]

_COLUMNS = """
     name          VARCHAR(200) NOT NULL,
     last_name     VARCHAR(200) NOT NULL,
     worker_number INT NOT NULL UNIQUE,
     date_joined   TIMESTAMP NULL,
     salary        FLOAT NULL,
     null_text     TEXT NULL,
     null_varchar  VARCHAR(100) NULL,
     null_bool     BOOLEAN NULL,
     null_date     TIMESTAMP NULL,
     null_int      INT NULL,
     null_float    FLOAT NULL
"""

SCHEMAS = {
    "postgres": [
        "DROP TABLE IF EXISTS developer, managers, employees",
        f"CREATE TABLE employees (id SERIAL PRIMARY KEY, {_COLUMNS})",
        "CREATE TABLE managers (employee_id INT NOT NULL REFERENCES employees (id))",
        "CREATE TABLE developer (employee_id INT NOT NULL REFERENCES employees (id), "
        "programming_language VARCHAR(50) NOT NULL)",
    ],
    "sqlite": [
        "DROP TABLE IF EXISTS developer",
        "DROP TABLE IF EXISTS managers",
        "DROP TABLE IF EXISTS employees",
        f"CREATE TABLE employees (id INTEGER PRIMARY KEY AUTOINCREMENT, {_COLUMNS})",
        "CREATE TABLE managers (employee_id INT NOT NULL)",
        "CREATE TABLE developer (employee_id INT NOT NULL, "
        "programming_language VARCHAR(50) NOT NULL)",
    ],
}

PARAMSTYLES = {"postgres": "%s", "sqlite": "?"}


def _employee_row(row: Tuple[Any, ...], engine: str) -> Tuple[Any, ...]:
    # sqlite3 has no native timestamp type; store ISO text.
    if engine == "sqlite":
        return tuple(v.isoformat() if isinstance(v, datetime) else v for v in row)
    return tuple(row)


def _insert(table: str, columns: Sequence[str], placeholder: str) -> str:
    marks = ", ".join([placeholder] * len(columns))
    return f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({marks})"


def seed_connection(conn: Any, engine: str) -> int:
    """
    Recreate and fill the test tables over a DB-API connection.

    Returns the number of employees inserted.
    """
    placeholder = PARAMSTYLES[engine]
    cur = conn.cursor()
    try:
        for statement in SCHEMAS[engine]:
            cur.execute(statement)
        cur.executemany(
            _insert(
                "employees",
                ["name", "last_name", "worker_number", "date_joined", "salary", "null_bool"],
                placeholder,
            ),
            [_employee_row(row, engine) for row in EMPLOYEES],
        )
        cur.executemany(
            _insert("managers", ["employee_id"], placeholder),
            [(employee_id,) for employee_id in MANAGER_IDS],
        )
        cur.executemany(
            _insert("developer", ["employee_id", "programming_language"], placeholder),
            DEVELOPERS,
        )
    finally:
        cur.close()
    conn.commit()
    return len(EMPLOYEES)


@app.command()
def main(
    dsn: Optional[str] = typer.Option(
        None,
        "--dsn",
        help="Optional DSN override for Postgres.",
    ),
) -> None:
    """
    Recreate the employees, managers and developer tables in Postgres.
    """
    with psycopg.connect(dsn or build_dsn()) as conn:
        rows = seed_connection(conn, "postgres")
    typer.echo(f"Seeded {rows} employees.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
