"""
sqlpaginate - paginated, filtered SELECT statements from request parameters.

This package turns a tagged pydantic record type plus the query string of a
request into a parameterized SQL statement, and maps the resulting rows back
into records together with pagination metadata:

- Filtering with ``=``, ``>``, ``<``, ``>=``, ``<=`` and ``<>`` (repeated
  ``=`` / ``<>`` become ``IN`` / ``NOT IN``)
- Sorting with ``sort=+name,-age``, always tie-broken by the id column
- LIMIT/OFFSET pagination with ``page`` and ``page_size``
- Raw where clauses and inner joins
- ``mysql`` (``?``) and ``postgres`` (``$1``) placeholder styles

The core performs no I/O; ``sqlpaginate.infrastructure`` runs queries through
psycopg when wanted.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from sqlpaginate.clauses import InnerJoin, RawWhereClause
from sqlpaginate.config import PAGE_SIZE, Settings, get_settings
from sqlpaginate.dialects import Dialect
from sqlpaginate.domain import (
    NullBool,
    NullFloat,
    NullInt,
    NullString,
    NullTime,
    PaginationResponse,
    Tag,
    asc,
    desc,
)
from sqlpaginate.errors import (
    ConfigurationError,
    PaginateError,
    PredicateError,
    ScanError,
    SchemaValidationError,
    UnsupportedDialectError,
)
from sqlpaginate.paginator import Paginator, PaginatorOptions
from sqlpaginate.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "PAGE_SIZE",
    "Settings",
    "get_settings",
    # Paginator
    "Dialect",
    "Paginator",
    "PaginatorOptions",
    "PaginationResponse",
    "Tag",
    "asc",
    "desc",
    # Clauses
    "InnerJoin",
    "RawWhereClause",
    # Scan destinations
    "NullBool",
    "NullFloat",
    "NullInt",
    "NullString",
    "NullTime",
    # Errors
    "ConfigurationError",
    "PaginateError",
    "PredicateError",
    "ScanError",
    "SchemaValidationError",
    "UnsupportedDialectError",
    # Logging
    "configure_logging",
    "get_logger",
]
