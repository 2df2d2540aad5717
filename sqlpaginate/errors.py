"""
Error model for sqlpaginate.

Every failure raised by the package is a local, synchronous validation error.
Nothing here is retryable: the core never touches the network, so a failed
call will fail again with the same input.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict


class ErrorCode(str, Enum):
    """Structured error codes, stable across releases."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    UNSUPPORTED_DIALECT = "UNSUPPORTED_DIALECT"
    SCHEMA_ERROR = "SCHEMA_ERROR"
    PREDICATE_ERROR = "PREDICATE_ERROR"
    SCAN_ERROR = "SCAN_ERROR"


class PaginateError(ValueError):
    """Base exception for all sqlpaginate errors."""

    code: ErrorCode = ErrorCode.CONFIGURATION_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"paginate: {message}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a dictionary suitable for an API response."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "retryable": False,
            }
        }


class ConfigurationError(PaginateError):
    """Invalid paginator options (blank table name, bad page size, ...)."""

    code = ErrorCode.CONFIGURATION_ERROR


class UnsupportedDialectError(ConfigurationError):
    """The given SQL dialect has no placeholder style registered."""

    code = ErrorCode.UNSUPPORTED_DIALECT

    def __init__(self, dialect: object) -> None:
        self.dialect = dialect
        super().__init__(f"given dialect {dialect!r} is not supported by this package")


class SchemaValidationError(PaginateError):
    """The record type cannot be mapped to a table."""

    code = ErrorCode.SCHEMA_ERROR


class PredicateError(PaginateError):
    """A raw where clause or join clause is malformed."""

    code = ErrorCode.PREDICATE_ERROR


class ScanError(PaginateError):
    """The row buffer scan protocol was used incorrectly."""

    code = ErrorCode.SCAN_ERROR


__all__ = [
    "ErrorCode",
    "PaginateError",
    "ConfigurationError",
    "UnsupportedDialectError",
    "SchemaValidationError",
    "PredicateError",
    "ScanError",
]
