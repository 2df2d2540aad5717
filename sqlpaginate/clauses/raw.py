"""
Raw where clauses.

Use a RawWhereClause for conditions the request filters cannot express::

    raw = RawWhereClause("postgres")
    raw.add_predicate("name ILIKE ? OR last_name ILIKE ?")
    raw.add_arg("%ringo%")
    raw.add_arg("%smith%")
    paginator.add_where_clause(raw)

Placeholders are always written as ``?``; they are rendered in the style of
the clause's dialect.
"""

from __future__ import annotations

from typing import Any, List, Union

from sqlpaginate.clauses.abstract import AbstractSqlClause
from sqlpaginate.dialects import Dialect, get_dialect, resolve_placeholders
from sqlpaginate.errors import PredicateError

PLACEHOLDER = "?"


class RawWhereClause(AbstractSqlClause):
    """A free-text predicate plus its arguments, in placeholder order."""

    def __init__(self, dialect: Union[str, Dialect]) -> None:
        self.dialect = get_dialect(dialect)
        self.predicate = ""
        self.args: List[Any] = []

    def add_predicate(self, predicate: str) -> None:
        """Set the predicate, replacing any previous one."""
        self.predicate = predicate

    def add_arg(self, value: Any) -> None:
        """Append one argument; call once per placeholder."""
        self.args.append(value)

    def validate(self) -> None:
        if not self.predicate.strip():
            raise PredicateError("raw where clause requires a predicate")
        placeholders = self.predicate.count(PLACEHOLDER)
        if placeholders == 0 and self.args:
            raise PredicateError(
                f"raw where clause has {len(self.args)} argument(s) but no placeholders"
            )
        if placeholders != len(self.args):
            raise PredicateError(
                f"raw where clause has {placeholders} placeholder(s) "
                f"but {len(self.args)} argument(s)"
            )

    def render(self) -> str:
        """Predicate with pending placeholders, ready to join a where clause."""
        return self.predicate.replace(PLACEHOLDER, self.dialect.placeholder)

    def __str__(self) -> str:
        return resolve_placeholders(self.render(), self.dialect)

    def __repr__(self) -> str:
        return f"RawWhereClause(dialect={self.dialect.value!r}, predicate={self.predicate!r}, args={self.args!r})"


__all__ = ["RawWhereClause"]
