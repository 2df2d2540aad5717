"""
Domain package for sqlpaginate.

Exports the record introspection, the value objects passed between the
extractor and the builders, and the scan destinations of the row buffer.
Keep this package focused on data definitions and validation concerns.
"""

from sqlpaginate.domain.descriptor import (
    FieldSpec,
    RecordDescriptor,
    Tag,
    describe,
    to_snake_case,
)
from sqlpaginate.domain.models import (
    FilterParameter,
    Operator,
    OrderByClause,
    PaginationRequest,
    PaginationResponse,
    SortDirection,
    WhereClause,
    asc,
    desc,
)
from sqlpaginate.domain.nullables import (
    CountSlot,
    NullBool,
    NullFloat,
    NullInt,
    NullString,
    NullTime,
    ScanSlot,
)

__all__ = [
    # Introspection
    "FieldSpec",
    "RecordDescriptor",
    "Tag",
    "describe",
    "to_snake_case",
    # Value objects
    "FilterParameter",
    "Operator",
    "OrderByClause",
    "PaginationRequest",
    "PaginationResponse",
    "SortDirection",
    "WhereClause",
    "asc",
    "desc",
    # Scan destinations
    "CountSlot",
    "NullBool",
    "NullFloat",
    "NullInt",
    "NullString",
    "NullTime",
    "ScanSlot",
]
