"""
Pytest configuration for dynorm.

Provides fixtures for:
- In-memory SQLite databases with the demo songs table
- Settings and DSN for PostgreSQL integration tests
- A pooled PostgreSQL database handle, skipped when no server is reachable
"""

from __future__ import annotations

import os
import sqlite3
from typing import Generator, List

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from dynorm.config import Settings, get_settings
from dynorm.infrastructure.database import PostgresDatabase, SqliteDatabase
from dynorm.infrastructure.db_factory import build_dsn
from scripts.init_db import _create_songs_table


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Settings are cached per process; tests that patch env need a fresh read."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sqlite_connection() -> Generator[sqlite3.Connection, None, None]:
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture
def sqlite_db(sqlite_connection: sqlite3.Connection) -> SqliteDatabase:
    """
    In-memory SQLite database holding an empty songs table (id, name, album).
    """
    database = SqliteDatabase(sqlite_connection)
    _create_songs_table(database)
    return database


@pytest.fixture
def statement_log(sqlite_connection: sqlite3.Connection) -> List[str]:
    """Every SQL statement sent over the SQLite connection, in order."""
    statements: List[str] = []
    sqlite_connection.set_trace_callback(statements.append)
    return statements


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_backend="postgres",
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "dynorm"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return build_dsn(test_settings)


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


@pytest.fixture
def pg_database(
    test_dsn: str, db_connection_available: bool
) -> Generator[PostgresDatabase, None, None]:
    """
    Pooled PostgreSQL handle with a freshly created songs table.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    pool = ConnectionPool(conninfo=test_dsn, min_size=1, max_size=2, timeout=10, open=True)
    database = PostgresDatabase(pool)
    _create_songs_table(database, drop=True)
    try:
        yield database
    finally:
        with database.session() as session:
            session.execute("DROP TABLE IF EXISTS songs")
            session.execute("DROP TABLE IF EXISTS albums")
        database.close()
