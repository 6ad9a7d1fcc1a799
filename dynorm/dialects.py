"""
Engine dialects.

A dialect captures the handful of places where SQLite and PostgreSQL differ for
the statements dynorm issues: the bound-parameter placeholder, the schema
catalog query, and how to read back the identifier generated by an INSERT.
"""

from __future__ import annotations

import abc
from typing import Any, Tuple


def quote_identifier(name: str) -> str:
    """Quote a table or column name, doubling embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


class Dialect(abc.ABC):
    """
    Interface implemented by each supported engine.

    Attributes
    ----------
    name : str
        Short identifier used in settings and logs.
    placeholder : str
        Bound-parameter marker understood by the DB-API driver.
    """

    name: str
    placeholder: str

    @abc.abstractmethod
    def column_catalog(self, table_name: str) -> Tuple[str, Tuple[Any, ...]]:
        """Return a query yielding one row per column, with a `name` key, in table order."""
        raise NotImplementedError

    @abc.abstractmethod
    def last_insert_id(self, table_name: str) -> Tuple[str, Tuple[Any, ...]]:
        """Return a query yielding the id generated by the session's last INSERT into the table."""
        raise NotImplementedError


class SqliteDialect(Dialect):
    name = "sqlite"
    placeholder = "?"

    def column_catalog(self, table_name: str) -> Tuple[str, Tuple[Any, ...]]:
        # Table-valued pragma so the table name can be bound.
        return "SELECT name FROM pragma_table_info(?) ORDER BY cid", (table_name,)

    def last_insert_id(self, table_name: str) -> Tuple[str, Tuple[Any, ...]]:
        # last_insert_rowid() is per connection; the session holds the connection.
        return "SELECT last_insert_rowid() AS id", ()


class PostgresDialect(Dialect):
    name = "postgres"
    placeholder = "%s"

    def column_catalog(self, table_name: str) -> Tuple[str, Tuple[Any, ...]]:
        sql = (
            "SELECT column_name AS name FROM information_schema.columns "
            "WHERE table_schema = current_schema() AND table_name = %s "
            "ORDER BY ordinal_position"
        )
        return sql, (table_name,)

    def last_insert_id(self, table_name: str) -> Tuple[str, Tuple[Any, ...]]:
        return (
            "SELECT currval(pg_get_serial_sequence(%s, 'id')) AS id",
            (quote_identifier(table_name),),
        )


SQLITE = SqliteDialect()
POSTGRES = PostgresDialect()


__all__ = [
    "Dialect",
    "SqliteDialect",
    "PostgresDialect",
    "SQLITE",
    "POSTGRES",
    "quote_identifier",
]
