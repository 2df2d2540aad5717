"""
Database driver helpers for sqlpaginate.

The paginator never opens connections; this module is the optional glue that
runs its SQL against PostgreSQL with psycopg and feeds the rows back through
the scan protocol. psycopg's ``RawCursor`` speaks PostgreSQL's native ``$1``
placeholders, which is exactly what the ``postgres`` dialect emits.

Includes retry logic for transient connection failures using tenacity.
"""

from __future__ import annotations

import atexit
import threading
from contextlib import contextmanager
from typing import Any, Generator, Iterable, List, Optional, Sequence, Tuple

import psycopg
from psycopg import Connection
from psycopg_pool import ConnectionPool
from pydantic import BaseModel
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from sqlpaginate.config import get_settings
from sqlpaginate.dialects import Dialect
from sqlpaginate.domain.models import PaginationResponse
from sqlpaginate.errors import ConfigurationError
from sqlpaginate.paginator import Paginator
from sqlpaginate.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn() -> str:
    """Compose a DSN string from settings."""
    settings = get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


class PoolManager:
    """
    Thread-safe singleton owning the process-wide connection pool.

    The pool is closed automatically on exit via an atexit hook.
    """

    _instance: Optional["PoolManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "PoolManager":
        """Create or return the singleton instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._sync_pool = None
                atexit.register(cls._instance.close_all)
            return cls._instance

    def get_sync_pool(self, min_size: int = 1, max_size: int = 10) -> ConnectionPool:
        """
        Get or create the synchronous connection pool.

        Parameters
        ----------
        min_size : int
            Minimum number of idle connections to keep.
        max_size : int
            Maximum total connections in the pool.
        """
        with self._lock:
            if self._sync_pool is None:
                self._sync_pool = ConnectionPool(
                    conninfo=build_dsn(), min_size=min_size, max_size=max_size, open=True
                )
            return self._sync_pool

    @contextmanager
    def sync_connection(self) -> Generator[Connection, None, None]:
        """
        Context manager for obtaining a connection from the pool.

        Example
        -------
            with PoolManager().sync_connection() as conn:
                records, response = fetch_page(paginator, conn)
        """
        pool = self.get_sync_pool()
        with pool.connection() as conn:
            yield conn

    def close_all(self) -> None:
        """Close the managed pool; called automatically on exit."""
        with self._lock:
            if self._sync_pool is not None:
                pool, self._sync_pool = self._sync_pool, None
                pool.close()


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn: Optional[str] = None) -> Connection:
    """
    Open a dedicated connection, retrying transient failures.

    Retries up to 3 times with exponential backoff.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn or build_dsn())


def get_sync_pool(min_size: int = 1, max_size: int = 10) -> ConnectionPool:
    """Get or create the process-wide pool via PoolManager."""
    return PoolManager().get_sync_pool(min_size=min_size, max_size=max_size)


def drain_rows(
    paginator: Paginator, rows: Iterable[Sequence[Any]]
) -> Tuple[List[BaseModel], PaginationResponse]:
    """
    Feed DB-API row tuples through the scan protocol.

    Works with any driver whose rows are plain sequences, in the order
    ``paginator.paginate()`` selected the columns.
    """
    for row in rows:
        paginator.scan_row(row)
    records = list(paginator.records())
    return records, paginator.response()


def fetch_page(
    paginator: Paginator, conn: Connection
) -> Tuple[List[BaseModel], PaginationResponse]:
    """
    Run a postgres paginator's query on ``conn`` and collect the page.

    Returns
    -------
    tuple of (list, PaginationResponse)
        The records of the page and the pagination metadata.
    """
    if paginator.dialect is not Dialect.POSTGRES:
        raise ConfigurationError(
            f"fetch_page runs postgres queries; got a {paginator.dialect.value} paginator"
        )
    sql, args = paginator.paginate()
    with psycopg.RawCursor(conn) as cur:
        cur.execute(sql, args)
        records, response = drain_rows(paginator, cur)
    log.debug(
        "fetched page",
        extra={"table": paginator.table, "rows": response.page_count, "total": response.total_size},
    )
    return records, response


__all__ = [
    "PoolManager",
    "build_dsn",
    "drain_rows",
    "fetch_page",
    "get_sync_connection",
    "get_sync_pool",
]
