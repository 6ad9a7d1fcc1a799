"""
Database handles consumed by the mapper.

A `Database` wraps a connection resource that is opened elsewhere (see
`db_factory`) and hands out sessions. A session is one unit of work on one
connection: it commits when the block exits cleanly and rolls back otherwise.
The mapper never opens or closes connections itself.
"""

from __future__ import annotations

import abc
import sqlite3
import threading
from contextlib import AbstractContextManager, contextmanager
from typing import Any, Dict, Generator, List, Sequence

import psycopg
from psycopg_pool import ConnectionPool

from dynorm.dialects import POSTGRES, SQLITE, Dialect
from dynorm.utils.logging import get_logger

log = get_logger(__name__)

Row = Dict[str, Any]

# Exceptions a driver may raise from any statement, including pool timeouts
# (psycopg_pool.PoolTimeout derives from psycopg.OperationalError).
DRIVER_ERRORS = (sqlite3.Error, psycopg.Error)


class Session:
    """
    Executes statements on a single checked-out cursor.

    Rows come back as column-name to value dicts regardless of driver.
    """

    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor

    def execute(self, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        log.debug("Executing SQL", extra={"sql": sql, "param_count": len(params)})
        if params:
            self._cursor.execute(sql, tuple(params))
        else:
            self._cursor.execute(sql)
        if self._cursor.description is None:
            return []
        names = [column[0] for column in self._cursor.description]
        return [dict(zip(names, row)) for row in self._cursor.fetchall()]


class Database(abc.ABC):
    """Connection handle interface shared by all backends."""

    dialect: Dialect

    @abc.abstractmethod
    def session(self) -> AbstractContextManager[Session]:  # pragma: no cover - interface only
        """Context manager yielding a `Session` bound to one connection."""
        raise NotImplementedError

    def execute(self, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        """Run one statement in its own session and return its rows."""
        with self.session() as session:
            return session.execute(sql, params)

    @abc.abstractmethod
    def close(self) -> None:  # pragma: no cover - interface only
        raise NotImplementedError


class SqliteDatabase(Database):
    """
    Owns a single sqlite3 connection and serializes access to it.

    The connection may be shared across threads (open it with
    `check_same_thread=False`); sessions are taken one at a time.
    """

    dialect = SQLITE

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._lock = threading.RLock()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        with self._lock:
            cursor = self._connection.cursor()
            try:
                yield Session(cursor)
                self._connection.commit()
            except BaseException:
                self._connection.rollback()
                raise
            finally:
                cursor.close()

    def close(self) -> None:
        with self._lock:
            self._connection.close()


class PostgresDatabase(Database):
    """
    Checks one connection out of a psycopg pool per session.

    The pool's connection context commits on success and rolls back on error.
    """

    dialect = POSTGRES

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                yield Session(cur)

    def close(self) -> None:
        self._pool.close()


__all__ = [
    "DRIVER_ERRORS",
    "Database",
    "PostgresDatabase",
    "Row",
    "Session",
    "SqliteDatabase",
]
