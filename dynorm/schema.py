"""
Schema introspection.

Derives a table name from a type name and reads the table's column list from
the engine's schema catalog. Both steps run once per mapped type; the result
is cached on the type as a `TypeSchema`.
"""

from __future__ import annotations

from typing import List, Optional

import inflection

from dynorm.domain.models import TypeSchema
from dynorm.errors import SchemaError
from dynorm.infrastructure.database import DRIVER_ERRORS, Database
from dynorm.utils.logging import get_logger

log = get_logger(__name__)


def resolve_table_name(type_name: str) -> str:
    """
    Lowercase a type name and pluralize it: ``"Song"`` -> ``"songs"``,
    ``"Person"`` -> ``"people"``.
    """
    if not type_name:
        raise ValueError("type name must be non-empty")
    return inflection.pluralize(type_name.lower())


def fetch_column_names(database: Database, table_name: str) -> List[str]:
    """
    Return the column names of ``table_name`` in catalog order.

    Issues exactly one catalog query. Entries without a name are skipped.
    Engines report an unknown table as an empty column list, so an empty
    result is treated as a missing table rather than returned.

    Raises
    ------
    SchemaError
        If the table does not exist or the catalog query fails.
    """
    sql, params = database.dialect.column_catalog(table_name)
    try:
        rows = database.execute(sql, params)
    except DRIVER_ERRORS as exc:
        raise SchemaError(f"Catalog query for table '{table_name}' failed: {exc}") from exc

    if not rows:
        raise SchemaError(f"Table '{table_name}' does not exist")
    return [row["name"] for row in rows if row.get("name") is not None]


def build_schema(
    database: Database, type_name: str, table_name: Optional[str] = None
) -> TypeSchema:
    """Resolve the table for a type and capture its columns."""
    table = table_name or resolve_table_name(type_name)
    columns = fetch_column_names(database, table)
    log.info(
        "Schema bound",
        extra={"type_name": type_name, "table": table, "columns": len(columns)},
    )
    return TypeSchema(table_name=table, column_names=tuple(columns))


__all__ = ["build_schema", "fetch_column_names", "resolve_table_name"]
