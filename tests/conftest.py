"""
Pytest configuration for sqlpaginate.

Provides fixtures for:
- Settings override for integration tests
- PostgreSQL connection management (skipped when unreachable)
- An in-memory sqlite database seeded with the employees tables
"""

from __future__ import annotations

import os
import sqlite3
from typing import Generator

import psycopg
import pytest

from scripts.seed_employees import seed_connection
from sqlpaginate.config import Settings, get_settings


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    """Drop cached settings so environment tweaks in a test never leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "paginate_test"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def seeded_postgres(db_connection: psycopg.Connection) -> int:
    """
    Recreate and seed the employees tables once per session.

    Returns the number of employees seeded.
    """
    return seed_connection(db_connection, "postgres")


@pytest.fixture()
def sqlite_db() -> Generator[sqlite3.Connection, None, None]:
    """In-memory sqlite database with the employees tables, for ``?`` queries."""
    conn = sqlite3.connect(":memory:")
    try:
        seed_connection(conn, "sqlite")
        yield conn
    finally:
        conn.close()
