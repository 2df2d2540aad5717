"""
Clauses package for sqlpaginate.

Re-exports the caller-facing clause types and the pure clause builders so
downstream code can import from ``sqlpaginate.clauses`` directly.
"""

from sqlpaginate.clauses.abstract import AbstractSqlClause, SqlClause
from sqlpaginate.clauses.builders import (
    build_joins,
    build_order_by,
    build_pagination,
    build_where,
    unique_order_by,
)
from sqlpaginate.clauses.join import InnerJoin
from sqlpaginate.clauses.raw import RawWhereClause

__all__ = [
    # Abstracts
    "AbstractSqlClause",
    "SqlClause",
    # Caller clauses
    "InnerJoin",
    "RawWhereClause",
    # Builders
    "build_joins",
    "build_order_by",
    "build_pagination",
    "build_where",
    "unique_order_by",
]
