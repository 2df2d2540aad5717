"""
SQL dialects and their positional placeholder styles.

``mysql`` uses the same ``?`` symbol for every argument and lets the driver
number them. ``postgres`` requires ``$1, $2, ...``; while a clause is being
built those placeholders are written as a pending marker and only numbered
once the whole clause exists, so fragments coming from different sources
interleave in final argument order.
"""

from __future__ import annotations

import itertools
import re
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Union

from sqlpaginate.errors import UnsupportedDialectError

# Marker for a numbered placeholder whose position is not known yet.
PENDING_PLACEHOLDER = "${}"

_PENDING_RE = re.compile(re.escape(PENDING_PLACEHOLDER))


class Dialect(str, Enum):
    MYSQL = "mysql"
    POSTGRES = "postgres"

    @property
    def placeholder(self) -> str:
        return PLACEHOLDERS[self]

    @property
    def numbered(self) -> bool:
        return self.placeholder == PENDING_PLACEHOLDER


PLACEHOLDERS: Mapping[Dialect, str] = MappingProxyType(
    {
        Dialect.MYSQL: "?",
        Dialect.POSTGRES: PENDING_PLACEHOLDER,
    }
)


def get_dialect(dialect: Union[str, Dialect]) -> Dialect:
    """
    Resolve a dialect name to a Dialect member.

    Raises
    ------
    UnsupportedDialectError
        If the name is not one of the registered dialects.
    """
    if isinstance(dialect, Dialect):
        return dialect
    try:
        return Dialect(dialect)
    except ValueError:
        raise UnsupportedDialectError(dialect) from None


def resolve_placeholders(clause: str, dialect: Dialect) -> str:
    """
    Number every pending placeholder of ``clause`` left to right.

    Clauses for dialects with a repeatable placeholder are returned as-is.
    """
    if not dialect.numbered:
        return clause
    counter = itertools.count(1)
    return _PENDING_RE.sub(lambda _: f"${next(counter)}", clause)


__all__ = [
    "Dialect",
    "PLACEHOLDERS",
    "PENDING_PLACEHOLDER",
    "get_dialect",
    "resolve_placeholders",
]
