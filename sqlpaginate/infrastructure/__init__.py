"""
Infrastructure package for sqlpaginate.

Centralizes database connectivity concerns (connection factory, pooling and
running a paginator's query). Keep this layer focused on I/O, decoupled from
the pure query-building core.
"""

from sqlpaginate.infrastructure.db_factory import (
    PoolManager,
    build_dsn,
    drain_rows,
    fetch_page,
    get_sync_connection,
    get_sync_pool,
)

__all__ = [
    "PoolManager",
    "build_dsn",
    "drain_rows",
    "fetch_page",
    "get_sync_connection",
    "get_sync_pool",
]
