"""
SQL clause builders.

Pure functions turning extracted parameters into the WHERE, ORDER BY,
LIMIT/OFFSET and JOIN parts of the paginated SELECT. They have no data
dependency on each other and never touch a database.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from sqlpaginate.clauses.join import InnerJoin
from sqlpaginate.clauses.raw import RawWhereClause
from sqlpaginate.dialects import Dialect, resolve_placeholders
from sqlpaginate.domain.models import (
    SORT_PARAMETER,
    FilterParameter,
    OrderByClause,
    SortDirection,
    WhereClause,
)

WHERE = " WHERE "
AND = " AND "
ORDER_BY = " ORDER BY "

_SORT_SIGNS = {"+": SortDirection.ASC, "-": SortDirection.DESC}


def build_where(
    dialect: Dialect,
    columns: Sequence[str],
    parameters: Sequence[FilterParameter],
    raw_clauses: Sequence[RawWhereClause] = (),
) -> WhereClause:
    """
    Build the WHERE clause for the request parameters and raw clauses.

    Parameter fragments follow the column order; raw clauses follow, in the
    order they were added. Numbered placeholders are resolved once, over the
    whole clause. Returns an empty, non-existing clause when there is nothing
    to filter on.
    """
    fragments: List[str] = []
    args: List[Any] = []
    placeholder = dialect.placeholder

    for column in columns:
        for p in parameters:
            if p.name != column:
                continue
            if p.operator.is_list:
                values = p.values()
                fragments.append(
                    f"{column} {p.operator.value} ({','.join([placeholder] * len(values))})"
                )
                args.extend(values)
            else:
                fragments.append(f"{column} {p.operator.value} {placeholder}")
                args.append(p.value)

    # An OR inside a raw predicate must not leak into the surrounding ANDs.
    group = len(fragments) + len(raw_clauses) > 1
    for raw in raw_clauses:
        predicate = raw.render()
        fragments.append(f"({predicate})" if group else predicate)
        args.extend(raw.args)

    if not fragments:
        return WhereClause()

    clause = resolve_placeholders(WHERE + AND.join(fragments), dialect)
    return WhereClause(clause=clause, args=args, exists=True)


def build_pagination(page_number: int, page_size: int) -> str:
    """LIMIT/OFFSET clause; the offset is 0 for any page number up to 1."""
    offset = 0 if page_number <= 1 else page_size * (page_number - 1)
    return f" LIMIT {page_size} OFFSET {offset}"


def unique_order_by(clauses: Sequence[OrderByClause], skip_column: str) -> List[OrderByClause]:
    """Drop repeated columns (first one wins) and any entry for ``skip_column``."""
    unique: List[OrderByClause] = []
    seen = {skip_column}
    for clause in clauses:
        if clause.column in seen:
            continue
        seen.add(clause.column)
        unique.append(clause)
    return unique


def _sort_clauses(
    parameters: Sequence[FilterParameter], columns: Sequence[str]
) -> List[OrderByClause]:
    sort: Optional[FilterParameter] = next(
        (p for p in parameters if p.name == SORT_PARAMETER), None
    )
    if sort is None:
        return []
    clauses: List[OrderByClause] = []
    for token in sort.value.split(","):
        direction = _SORT_SIGNS.get(token[:1])
        column = token[1:]
        if direction is None or column not in columns:
            continue
        clauses.append(OrderByClause(column=column, direction=direction))
    return clauses


def build_order_by(
    parameters: Sequence[FilterParameter],
    columns: Sequence[str],
    id_column: str,
    explicit: Sequence[OrderByClause] = (),
) -> str:
    """
    Build the ORDER BY clause.

    Explicit entries take precedence over the ``sort`` request parameter. The
    id column is always the last term so that rows keep the same order from
    one page to the next.
    """
    clauses = explicit if explicit else _sort_clauses(parameters, columns)
    terms = [str(c) for c in unique_order_by(clauses, id_column)]
    terms.append(id_column)
    return ORDER_BY + ",".join(terms)


def build_joins(table: str, joins: Sequence[InnerJoin]) -> str:
    return "".join(join.render(table) for join in joins)


__all__ = [
    "build_where",
    "build_pagination",
    "build_order_by",
    "build_joins",
    "unique_order_by",
]
