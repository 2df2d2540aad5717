"""
Request parameter extraction.

Filters come from the query string of a request URL as
``<param><operator><value>`` tokens joined by ``&``::

    http://localhost/employees?name=Ringo&salary>=4000&sort=+name,-age

Supported operators are ``>=``, ``<=``, ``<>``, ``>``, ``<`` and ``=``.
Repeating ``name=a&name=b`` produces ``name IN (a, b)`` and repeating
``name<>a&name<>b`` produces ``name NOT IN (a, b)``.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence
from urllib.parse import parse_qs, unquote, urlsplit

from sqlpaginate.domain.models import (
    REQUEST_OPERATORS,
    SORT_PARAMETER,
    FilterParameter,
    Operator,
    PaginationRequest,
)

_GROUPED_OPERATORS = {
    Operator.EQ: Operator.IN,
    Operator.NE: Operator.NOT_IN,
}


def _match(token: str, name: str, operator: Operator) -> Optional[str]:
    """Return the value of ``token`` if it reads ``<name><operator><value>``."""
    prefix = name + operator.value
    if token.startswith(prefix) and len(token) > len(prefix):
        return token[len(prefix):]
    return None


def _parse_token(token: str, name: str) -> Optional[tuple]:
    for operator in REQUEST_OPERATORS:
        value = _match(token, name, operator)
        if value is not None:
            return operator, value
    return None


def _groupable(p: FilterParameter) -> bool:
    return p.operator in _GROUPED_OPERATORS and p.name != SORT_PARAMETER


def group_parameters(params: Sequence[FilterParameter]) -> List[FilterParameter]:
    """
    Collapse repeated ``=`` and ``<>`` parameters of one column into ``IN`` and
    ``NOT IN`` parameters.

    The grouped parameter takes the place of the first occurrence and holds the
    distinct values, comma-joined in first-seen order. A column with a single
    occurrence keeps its plain operator.
    """
    counts: Dict[tuple, int] = {}
    for p in params:
        if _groupable(p):
            counts[(p.name, p.operator)] = counts.get((p.name, p.operator), 0) + 1

    grouped: List[FilterParameter] = []
    seen: Dict[tuple, List[str]] = {}
    for p in params:
        key = (p.name, p.operator)
        if not _groupable(p) or counts[key] == 1:
            grouped.append(p)
            continue
        if key in seen:
            if p.value not in seen[key]:
                seen[key].append(p.value)
            continue
        seen[key] = [p.value]
        grouped.append(p)

    return [
        p.model_copy(
            update={
                "operator": _GROUPED_OPERATORS[p.operator],
                "value": ",".join(seen[(p.name, p.operator)]),
            }
        )
        if (p.name, p.operator) in seen
        else p
        for p in grouped
    ]


def get_parameters(
    columns: Sequence[str],
    mappers: Mapping[str, str],
    url: str,
) -> List[FilterParameter]:
    """
    Extract filter parameters for ``columns`` from the query string of ``url``.

    Parameters
    ----------
    columns : sequence of str
        Filterable column names, in declaration order.
    mappers : mapping of str to str
        Column name -> custom request parameter name.
    url : str
        Full request URL, or just ``?<query>``.

    Returns
    -------
    list of FilterParameter
        Parameters named after their column, followed by the ``sort``
        parameter when present.
    """
    decoded = unquote(url)
    i = decoded.find("?")
    if i == -1:
        return []
    tokens = decoded[i + 1:].split("&")

    params: List[FilterParameter] = []
    for column in columns:
        name = mappers.get(column) or column
        for token in tokens:
            parsed = _parse_token(token, name)
            if parsed is None:
                continue
            operator, value = parsed
            params.append(FilterParameter(name=column, operator=operator, value=value))

    # sort is always recognized, filterable or not, and only with "=".
    for token in tokens:
        value = _match(token, SORT_PARAMETER, Operator.EQ)
        if value is not None:
            params.append(FilterParameter(name=SORT_PARAMETER, operator=Operator.EQ, value=value))

    return group_parameters(params)


def _positive_int(values: Mapping[str, List[str]], key: str) -> Optional[int]:
    raw = values.get(key)
    if not raw:
        return None
    try:
        number = int(raw[0])
    except ValueError:
        return None
    return number if number > 0 else None


def get_request_data(url: str, default_page_size: int) -> PaginationRequest:
    """
    Read ``page`` and ``page_size`` from the query string of ``url``.

    Missing, non-numeric and non-positive values fall back to page 1 and
    ``default_page_size``.
    """
    values = parse_qs(urlsplit(url).query)
    return PaginationRequest(
        page_number=_positive_int(values, "page") or 1,
        page_size=_positive_int(values, "page_size") or default_page_size,
    )


__all__ = ["get_parameters", "get_request_data", "group_parameters"]
