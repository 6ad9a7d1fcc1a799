"""
Infrastructure package for dynorm.

Centralizes database connectivity concerns (connection factories, pooling and
the `Database` handles the mapper consumes). Keep this layer focused on I/O
and resource management, decoupled from schema and mapping logic.
"""

from dynorm.infrastructure.database import (
    DRIVER_ERRORS,
    Database,
    PostgresDatabase,
    Session,
    SqliteDatabase,
)
from dynorm.infrastructure.db_factory import (
    build_dsn,
    get_database,
    get_sync_pool,
    open_sqlite_connection,
)

__all__ = [
    "DRIVER_ERRORS",
    "Database",
    "PostgresDatabase",
    "Session",
    "SqliteDatabase",
    "build_dsn",
    "get_database",
    "get_sync_pool",
    "open_sqlite_connection",
]
