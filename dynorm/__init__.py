"""
dynorm - a minimal schema-driven object-relational mapper.

A `Model` subclass is bound to one table. Its fields are discovered from the
table's schema catalog once, when the type is bound, and instances are mapped
to rows one at a time:

- Table names are inferred from type names (lowercased and pluralized)
- Columns become readable/writable fields on instances
- `save` runs a sparse, parameter-bound INSERT and reads back the generated id
- `find_by` runs a single-column equality lookup

SQLite and PostgreSQL are supported through explicitly passed `Database`
handles.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from dynorm.config import Settings, get_settings
from dynorm.domain.models import TypeSchema
from dynorm.errors import (
    DynormError,
    PersistenceError,
    QueryError,
    SchemaError,
    UnknownFieldError,
)
from dynorm.infrastructure.database import Database, PostgresDatabase, SqliteDatabase
from dynorm.infrastructure.db_factory import get_database
from dynorm.model import Column, Model
from dynorm.schema import build_schema, fetch_column_names, resolve_table_name
from dynorm.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Mapping
    "Column",
    "Model",
    "TypeSchema",
    # Schema introspection
    "build_schema",
    "fetch_column_names",
    "resolve_table_name",
    # Database handles
    "Database",
    "PostgresDatabase",
    "SqliteDatabase",
    "get_database",
    # Errors
    "DynormError",
    "PersistenceError",
    "QueryError",
    "SchemaError",
    "UnknownFieldError",
    # Logging
    "configure_logging",
    "get_logger",
]
