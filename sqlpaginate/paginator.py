"""
Paginator: builds the paginated SELECT for a record type and a request.

Usage:
    from sqlpaginate import Paginator, desc

    paginator = Paginator(Employee, "postgres", request_url, table_name="employees")
    sql, args = paginator.paginate()

    with conn.cursor() as cur:
        cur.execute(sql, args)
        for row in cur:
            paginator.scan_row(row)

    employees = list(paginator.records())
    response = paginator.response()

The generated statement always selects ``count(*) over()`` as its last column,
so the total number of matching rows travels with every page and no second
COUNT query is needed.
"""

from __future__ import annotations

import copy
from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, PositiveInt, ValidationError, field_validator

from sqlpaginate.clauses.abstract import SqlClause
from sqlpaginate.clauses.builders import (
    build_joins,
    build_order_by,
    build_pagination,
    build_where,
    unique_order_by,
)
from sqlpaginate.clauses.join import InnerJoin
from sqlpaginate.clauses.raw import RawWhereClause
from sqlpaginate.config import get_settings
from sqlpaginate.dialects import Dialect, get_dialect
from sqlpaginate.domain.descriptor import RecordDescriptor, describe
from sqlpaginate.domain.models import (
    FilterParameter,
    OrderByClause,
    PaginationRequest,
    PaginationResponse,
)
from sqlpaginate.domain.nullables import ScanSlot
from sqlpaginate.errors import ConfigurationError, PredicateError
from sqlpaginate.parameters import get_parameters, get_request_data
from sqlpaginate.rows import RowBuffer
from sqlpaginate.utils.logging import get_logger

log = get_logger(__name__)


class PaginatorOptions(BaseModel):
    """
    Construction-time options of a Paginator.

    ``page_size`` overrides the ``page_size`` request parameter. ``order_by``
    overrides the ``sort`` request parameter.
    """

    table_name: Optional[str] = None
    page_size: Optional[PositiveInt] = None
    order_by: Tuple[OrderByClause, ...] = ()

    model_config = {"frozen": True}

    @field_validator("table_name")
    @classmethod
    def _table_name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("table name should not be an empty string")
        return value


def _configuration_error(exc: ValidationError) -> ConfigurationError:
    messages = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return ConfigurationError(messages)


def _build_options(**kwargs: Any) -> PaginatorOptions:
    try:
        return PaginatorOptions(**kwargs)
    except ValidationError as exc:
        raise _configuration_error(exc) from exc


def _default_page_size() -> int:
    try:
        return get_settings().page_size
    except ValidationError as exc:
        raise _configuration_error(exc) from exc


class Paginator:
    """
    Paginates a database table described by a pydantic record type.

    Parameters
    ----------
    record : type[BaseModel] or BaseModel
        The record class (or a zero-valued instance of it).
    dialect : str or Dialect
        ``"postgres"`` or ``"mysql"``.
    url : str
        Request URL (or just ``?<query>``) holding filters, ``sort``, ``page``
        and ``page_size``.
    table_name : str, optional
        Table to paginate; defaults to the snake_case class name.
    page_size : int, optional
        Fixed page size, ignoring the request's ``page_size``.
    order_by : sequence of OrderByClause, optional
        Fixed ordering built with ``asc()`` / ``desc()``, ignoring ``sort``.

    Raises
    ------
    UnsupportedDialectError
        For an unknown dialect, before the record type is inspected.
    ConfigurationError
        For a blank table name or a non-positive page size.
    SchemaValidationError
        If the record type cannot be mapped to a table.
    """

    def __init__(
        self,
        record: Any,
        dialect: Union[str, Dialect],
        url: str = "",
        *,
        table_name: Optional[str] = None,
        page_size: Optional[int] = None,
        order_by: Sequence[OrderByClause] = (),
    ) -> None:
        self.dialect = get_dialect(dialect)
        self.options = _build_options(
            table_name=table_name, page_size=page_size, order_by=tuple(order_by)
        )
        self.descriptor: RecordDescriptor = describe(record, self.options.table_name)

        request = get_request_data(url, _default_page_size())
        if self.options.page_size is not None:
            request = request.model_copy(update={"page_size": self.options.page_size})
        self.request: PaginationRequest = request

        self.parameters: List[FilterParameter] = get_parameters(
            self.descriptor.filterable_columns, self.descriptor.mappers, url
        )
        self.order_by: List[OrderByClause] = unique_order_by(
            self.options.order_by, self.descriptor.id_column
        )

        self._raw_clauses: List[RawWhereClause] = []
        self._joins: List[InnerJoin] = []
        self._page_count = 0
        self._total_size = 0
        self._rows = RowBuffer(self.descriptor, self.set_total_result, self.set_page_count)

    @property
    def table(self) -> str:
        return self.descriptor.table

    @property
    def page_number(self) -> int:
        return self.request.page_number

    @property
    def page_size(self) -> int:
        return self.request.page_size

    def _check_clause(self, clause: SqlClause, kind: type) -> None:
        if not isinstance(clause, kind):
            raise PredicateError(f"expected a {kind.__name__}; got {type(clause).__name__}")
        if clause.dialect is not self.dialect:
            raise PredicateError(
                f"clause dialect {clause.dialect.value!r} does not match "
                f"paginator dialect {self.dialect.value!r}"
            )
        clause.validate()

    def add_where_clause(self, clause: RawWhereClause) -> None:
        """
        Attach a raw predicate; it is ANDed with the request filters.

        The clause is copied once validated, so later changes to the caller's
        object do not reach the paginator.
        """
        self._check_clause(clause, RawWhereClause)
        self._raw_clauses.append(copy.deepcopy(clause))

    def add_join_clause(self, clause: InnerJoin) -> None:
        """Attach an inner join, rendered after the table name. Copied like raw predicates."""
        self._check_clause(clause, InnerJoin)
        self._joins.append(copy.deepcopy(clause))

    def paginate(self) -> Tuple[str, List[Any]]:
        """
        Build the paginated SELECT statement.

        Returns
        -------
        tuple of (str, list)
            SQL text with placeholders for the dialect, and the arguments in
            placeholder order.
        """
        columns = self.descriptor.columns
        where = build_where(self.dialect, columns, self.parameters, self._raw_clauses)
        order = build_order_by(
            self.parameters, columns, self.descriptor.id_column, self.order_by
        )
        pagination = build_pagination(self.page_number, self.page_size)
        joins = build_joins(self.table, self._joins)

        sql = (
            f"SELECT {', '.join(columns)}, count(*) over() FROM {self.table}"
            f"{joins}{where.clause}{order}{pagination}"
        )
        log.debug(
            "built paginated query",
            extra={
                "table": self.table,
                "dialect": self.dialect.value,
                "sql": sql,
                "arg_count": len(where.args),
            },
        )
        return sql, list(where.args)

    def set_page_count(self, count: int) -> None:
        """Number of records in the current page, known after the query ran."""
        self._page_count = count

    def set_total_result(self, size: int) -> None:
        """Total number of matching records, as read from ``count(*) over()``."""
        self._total_size = size

    def response(self) -> PaginationResponse:
        """Pagination metadata for clients; call once counts are known."""
        has_next = self._total_size > 0 and self.page_number * self.page_size < self._total_size
        return PaginationResponse(
            page_number=self.page_number,
            next_page_number=self.page_number + 1 if has_next else 0,
            has_next_page=has_next,
            has_previous_page=self.page_number > 1,
            page_count=self._page_count,
            total_size=self._total_size,
        )

    # Scan protocol, see sqlpaginate.rows.

    def get_scan_destinations(self) -> List[ScanSlot]:
        return self._rows.get_scan_destinations()

    def scan_row(self, row: Sequence[Any]) -> None:
        self._rows.scan_row(row)

    def has_next(self) -> bool:
        return self._rows.has_next()

    def scan_into(self, dest: Optional[BaseModel]) -> None:
        self._rows.scan_into(dest)

    def new_record(self) -> BaseModel:
        """A zero-valued record to pass to ``scan_into``."""
        return self.descriptor.new_record()

    def records(self) -> Iterator[BaseModel]:
        return self._rows.records()


__all__ = ["Paginator", "PaginatorOptions"]
