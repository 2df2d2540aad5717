"""
Interfaces for clauses a caller can attach to a paginator.

Raw where clauses and join clauses are bound to a dialect when they are
created, and validated when they are attached, before they ever reach the
builders.
"""

from __future__ import annotations

import abc
from typing import Protocol, runtime_checkable

from sqlpaginate.dialects import Dialect


@runtime_checkable
class SqlClause(Protocol):
    """
    Common interface of caller-provided clauses.

    Attributes
    ----------
    dialect : Dialect
        Dialect the clause renders placeholders for.
    """

    dialect: Dialect

    def validate(self) -> None:
        """Raise ``PredicateError`` if the clause cannot be rendered."""
        ...


class AbstractSqlClause(abc.ABC):
    """ABC helper for class-based clauses."""

    dialect: Dialect

    @abc.abstractmethod
    def validate(self) -> None:  # pragma: no cover - interface only
        raise NotImplementedError


__all__ = ["SqlClause", "AbstractSqlClause"]
