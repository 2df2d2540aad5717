"""
Domain models for sqlpaginate.

Defines the value objects that travel between the parameter extractor, the
clause builders and the paginator. All of them are immutable once built.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, List

from pydantic import BaseModel, Field

# Name of the request parameter that drives ORDER BY.
SORT_PARAMETER = "sort"


class Operator(str, Enum):
    """Comparison operators accepted in a request and emitted in SQL."""

    EQ = "="
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    NE = "<>"
    IN = "IN"
    NOT_IN = "NOT IN"

    @property
    def is_list(self) -> bool:
        return self in (Operator.IN, Operator.NOT_IN)


# Order matters: composite operators must be tried before their prefixes.
REQUEST_OPERATORS = (
    Operator.GTE,
    Operator.LTE,
    Operator.NE,
    Operator.GT,
    Operator.LT,
    Operator.EQ,
)


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class FilterParameter(BaseModel):
    """
    A single filter taken from the request.

    ``name`` is the column the filter applies to (or ``sort``). For ``IN`` and
    ``NOT IN`` the value holds the comma-joined list of distinct values.
    """

    name: str = Field(..., description="Column name, or the sort pseudo-parameter.")
    operator: Operator = Field(..., description="Comparison operator.")
    value: str = Field(..., description="Raw value as found in the request.")

    model_config = {"frozen": True}

    def values(self) -> List[str]:
        """Return the individual values of a list operator (or the single value)."""
        if self.operator.is_list:
            return self.value.split(",")
        return [self.value]


class OrderByClause(BaseModel):
    """One ``column direction`` term of an explicit ORDER BY option."""

    column: str = Field(..., min_length=1)
    direction: SortDirection = SortDirection.ASC

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.column} {self.direction.value}"


def asc(column: str) -> OrderByClause:
    """Explicit ascending ORDER BY entry for a paginator."""
    return OrderByClause(column=column.strip(), direction=SortDirection.ASC)


def desc(column: str) -> OrderByClause:
    """Explicit descending ORDER BY entry for a paginator."""
    return OrderByClause(column=column.strip(), direction=SortDirection.DESC)


class PaginationRequest(BaseModel):
    """Page and page size requested by the client."""

    page_number: int = Field(1, ge=1)
    page_size: int = Field(..., ge=1)

    model_config = {"frozen": True}


class PaginationResponse(BaseModel):
    """
    Information about the pagination that clients can use to paginate further.
    """

    page_number: int = 0
    next_page_number: int = 0
    has_next_page: bool = False
    has_previous_page: bool = False
    page_count: int = 0
    total_size: int = 0


class WhereClause(BaseModel):
    """Finished WHERE clause with its arguments in placeholder order."""

    clause: str = ""
    args: List[Any] = Field(default_factory=list)
    exists: bool = False

    model_config = {"frozen": True}


__all__ = [
    "SORT_PARAMETER",
    "Operator",
    "REQUEST_OPERATORS",
    "SortDirection",
    "FilterParameter",
    "OrderByClause",
    "asc",
    "desc",
    "PaginationRequest",
    "PaginationResponse",
    "WhereClause",
]
