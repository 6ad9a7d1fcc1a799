"""
Database connection factory utilities for dynorm.

Opens the connection resources behind a `Database` handle: a single sqlite3
connection for the SQLite backend, or a psycopg connection pool for PostgreSQL.
The PoolManager singleton keeps one pool per process and closes it on exit.

Includes retry logic for transient connection failures using tenacity.
"""

from __future__ import annotations

import atexit
import sqlite3
import threading
from pathlib import Path
from typing import Optional

from psycopg_pool import ConnectionPool
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from dynorm.config import Settings, get_settings
from dynorm.infrastructure.database import Database, PostgresDatabase, SqliteDatabase
from dynorm.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a PostgreSQL DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


class PoolManager:
    """
    Thread-safe singleton for managing the PostgreSQL connection pool.

    Handles lifecycle management with automatic cleanup via atexit hook.
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

    def get_sync_pool(self, settings: Optional[Settings] = None) -> ConnectionPool:
        """
        Get or create the synchronous connection pool.

        Parameters
        ----------
        settings : Settings, optional
            Source of DSN, pool bounds and checkout timeout. Defaults to the
            cached application settings.

        Returns
        -------
        ConnectionPool
            The managed sync pool instance.
        """
        with self._lock:
            # A Database handle may have closed the pool it was given.
            if self._sync_pool is None or self._sync_pool.closed:
                settings = settings or get_settings()
                self._sync_pool = ConnectionPool(
                    conninfo=build_dsn(settings),
                    min_size=settings.db_pool_min_size,
                    max_size=settings.db_pool_max_size,
                    timeout=settings.db_pool_timeout_seconds,
                    open=True,
                )
                log.info(
                    "Connection pool opened",
                    extra={
                        "min_size": settings.db_pool_min_size,
                        "max_size": settings.db_pool_max_size,
                    },
                )
            return self._sync_pool

    def close_all(self) -> None:
        """
        Close the managed pool and release resources.

        This is called automatically on exit via atexit hook.
        """
        with self._lock:
            if self._sync_pool is not None:
                try:
                    self._sync_pool.close()
                finally:
                    self._sync_pool = None


def get_sync_pool(settings: Optional[Settings] = None) -> ConnectionPool:
    """Get or create the PostgreSQL connection pool via PoolManager."""
    return PoolManager().get_sync_pool(settings)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(sqlite3.OperationalError),
    reraise=True,
)
def open_sqlite_connection(path: str | Path) -> sqlite3.Connection:
    """
    Open a SQLite database file, creating parent directories as needed.

    `":memory:"` opens a private in-memory database. The connection is usable
    from any thread; `SqliteDatabase` serializes access to it.
    """
    target = str(path)
    if target != ":memory:":
        db_path = Path(target).expanduser().resolve()
        db_path.parent.mkdir(parents=True, exist_ok=True)
        target = str(db_path)
    return sqlite3.connect(target, check_same_thread=False)


def get_database(settings: Optional[Settings] = None) -> Database:
    """
    Build a `Database` handle for the configured backend.

    The caller owns the returned handle and should `close()` it when done.
    """
    settings = settings or get_settings()
    if settings.db_backend == "postgres":
        return PostgresDatabase(get_sync_pool(settings))
    return SqliteDatabase(open_sqlite_connection(settings.sqlite_path))


__all__ = [
    "PoolManager",
    "build_dsn",
    "get_database",
    "get_sync_pool",
    "open_sqlite_connection",
]
