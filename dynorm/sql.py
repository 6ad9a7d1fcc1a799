"""
Statement rendering.

Values are never written into SQL text: every statement is returned with a
parameter tuple for the driver to bind. Table and column names, which cannot
be bound, are always quoted.
"""

from __future__ import annotations

from typing import Any, Sequence, Tuple

from dynorm.dialects import Dialect, quote_identifier

Statement = Tuple[str, Tuple[Any, ...]]


def render_insert(
    dialect: Dialect, table_name: str, columns: Sequence[str], values: Sequence[Any]
) -> Statement:
    """
    Build a sparse INSERT for the given columns.

    With no columns the row is created from table defaults alone.
    """
    if len(columns) != len(values):
        raise ValueError("columns and values must have the same length")
    table = quote_identifier(table_name)
    if not columns:
        return f"INSERT INTO {table} DEFAULT VALUES", ()
    column_list = ", ".join(quote_identifier(c) for c in columns)
    placeholders = ", ".join([dialect.placeholder] * len(columns))
    return f"INSERT INTO {table} ({column_list}) VALUES ({placeholders})", tuple(values)


def render_select_where(dialect: Dialect, table_name: str, column: str, value: Any) -> Statement:
    """Build `SELECT *` with a single equality predicate; `None` matches NULL."""
    table = quote_identifier(table_name)
    target = quote_identifier(column)
    if value is None:
        return f"SELECT * FROM {table} WHERE {target} IS NULL", ()
    return f"SELECT * FROM {table} WHERE {target} = {dialect.placeholder}", (value,)


__all__ = ["Statement", "render_insert", "render_select_where"]
