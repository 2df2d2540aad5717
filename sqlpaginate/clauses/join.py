"""
Inner join clauses.

    join = InnerJoin("postgres")
    join.on("id", "managers", "employee_id")
    paginator.add_join_clause(join)

renders ``JOIN managers ON employees.id = managers.employee_id``.
"""

from __future__ import annotations

from typing import Union

from sqlpaginate.clauses.abstract import AbstractSqlClause
from sqlpaginate.dialects import Dialect, get_dialect
from sqlpaginate.errors import PredicateError


class InnerJoin(AbstractSqlClause):
    def __init__(self, dialect: Union[str, Dialect]) -> None:
        self.dialect = get_dialect(dialect)
        self.column = ""
        self.target_table = ""
        self.target_column = ""

    def on(self, column: str, target_table: str, target_column: str) -> None:
        """Join ``target_table`` where ``<table>.column = target_table.target_column``."""
        self.column = column
        self.target_table = target_table
        self.target_column = target_column

    def validate(self) -> None:
        self.column = self.column.strip()
        self.target_table = self.target_table.strip()
        self.target_column = self.target_column.strip()
        if not (self.column and self.target_table and self.target_column):
            raise PredicateError(
                "inner join requires a column, a target table and a target column"
            )

    def render(self, table: str) -> str:
        return (
            f" JOIN {self.target_table} ON {table}.{self.column}"
            f" = {self.target_table}.{self.target_column}"
        )


__all__ = ["InnerJoin"]
