"""
Record mapping.

`Model` subclasses are bound to one table. Binding reads the table's columns
once and installs a `Column` descriptor per column, so instances expose exactly
the table's fields. Instances are inserted with sparse, parameter-bound INSERT
statements and looked up with single-column equality queries.

Usage:
    from dynorm import Model, get_database

    db = get_database()

    class Song(Model, database=db):
        pass

    song = Song(name="Thriller", album="Thriller")
    song.save()
    Song.find_by("name", "Thriller")
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Type, TypeVar

from dynorm.domain.models import PRIMARY_KEY, TypeSchema
from dynorm.errors import PersistenceError, QueryError, SchemaError, UnknownFieldError
from dynorm.infrastructure.database import DRIVER_ERRORS, Database, Row
from dynorm.schema import build_schema
from dynorm.sql import Statement, render_insert, render_select_where
from dynorm.utils.logging import get_logger

log = get_logger(__name__)

M = TypeVar("M", bound="Model")

_MISSING = object()


class Column:
    """Readable, writable field backed by the instance's value map."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __get__(self, instance: Optional["Model"], owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        return instance._values.get(self.name)

    def __set__(self, instance: "Model", value: Any) -> None:
        instance._values[self.name] = value

    def __repr__(self) -> str:
        return f"Column({self.name!r})"


class Model:
    """
    Base class for mapped record types.

    Bind at definition time with ``class Song(Model, database=db)`` or later
    with ``Song.bind(db)``. ``table_name=`` overrides the pluralized type name.
    """

    _schema: ClassVar[Optional[TypeSchema]] = None
    _database: ClassVar[Optional[Database]] = None
    _table_override: ClassVar[Optional[str]] = None

    _values: Dict[str, Any]

    def __init_subclass__(
        cls,
        database: Optional[Database] = None,
        table_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        # Each subclass maps its own table; nothing is inherited from a bound parent.
        cls._schema = None
        cls._database = None
        cls._table_override = table_name
        if database is not None:
            cls.bind(database)

    # Binding

    @classmethod
    def bind(cls, database: Database, table_name: Optional[str] = None) -> TypeSchema:
        """
        Read the table's columns and install one field per column.

        Raises
        ------
        SchemaError
            If the type is already bound, the table is missing, or a column
            name collides with an attribute of the type.
        """
        if cls._schema is not None:
            raise SchemaError(f"{cls.__name__} is already bound to '{cls._schema.table_name}'")

        schema = build_schema(database, cls.__name__, table_name or cls._table_override)
        for name in schema.column_names:
            # Anything reachable through the MRO counts, bases between Model and cls included.
            existing = getattr(cls, name, _MISSING)
            if name == "_values" or (existing is not _MISSING and not isinstance(existing, Column)):
                raise SchemaError(
                    f"Column '{name}' of '{schema.table_name}' collides with "
                    f"an attribute of {cls.__name__}"
                )
        for name in schema.column_names:
            setattr(cls, name, Column(name))

        cls._schema = schema
        cls._database = database
        return schema

    @classmethod
    def _bound(cls) -> Tuple[TypeSchema, Database]:
        if cls._schema is None or cls._database is None:
            raise SchemaError(f"{cls.__name__} is not bound to a database")
        return cls._schema, cls._database

    @classmethod
    def table_name(cls) -> str:
        return cls._bound()[0].table_name

    @classmethod
    def column_names(cls) -> List[str]:
        return list(cls._bound()[0].column_names)

    # Construction

    def __init__(self, fields: Optional[Mapping[str, Any]] = None, /, **kwargs: Any) -> None:
        schema, _ = self._bound()
        values = dict(fields or {})
        values.update(kwargs)
        # `id` is assigned by `save` only.
        unknown = [name for name in values if name not in schema.insertable_columns]
        if unknown:
            raise UnknownFieldError(type(self).__name__, unknown, schema.insertable_columns)

        self._values = {}
        for name, value in values.items():
            setattr(self, name, value)

    @classmethod
    def _from_row(cls: Type[M], row: Row) -> M:
        schema, _ = cls._bound()
        record = cls.__new__(cls)
        record._values = {name: row.get(name) for name in schema.column_names}
        return record

    # Persistence

    @property
    def is_saved(self) -> bool:
        return self._values.get(PRIMARY_KEY) is not None

    def insert_statement(self) -> Statement:
        """The INSERT `save` would run: only fields holding a value, never `id`."""
        schema, database = self._bound()
        columns = [name for name in schema.insertable_columns if self._values.get(name) is not None]
        values = [self._values[name] for name in columns]
        return render_insert(database.dialect, schema.table_name, columns, values)

    def save(self) -> Optional[int]:
        """
        Insert this record as a new row and store the generated id.

        Every call inserts a new row; there is no update path. Returns the new
        id, or None when the table has no `id` column.

        Raises
        ------
        PersistenceError
            If the insert or the id lookup fails. The record is left unchanged.
        """
        schema, database = self._bound()
        sql, params = self.insert_statement()
        new_id = None
        try:
            with database.session() as session:
                session.execute(sql, params)
                if schema.has_column(PRIMARY_KEY):
                    id_sql, id_params = database.dialect.last_insert_id(schema.table_name)
                    new_id = session.execute(id_sql, id_params)[0]["id"]
                    # Raised inside the session so the INSERT is rolled back.
                    if new_id is None:
                        raise PersistenceError(
                            f"Insert into '{schema.table_name}' produced no id; "
                            f"is '{PRIMARY_KEY}' backed by a sequence?"
                        )
        except DRIVER_ERRORS as exc:
            raise PersistenceError(f"Insert into '{schema.table_name}' failed: {exc}") from exc

        if new_id is not None:
            self._values[PRIMARY_KEY] = new_id
        log.debug("Record saved", extra={"table": schema.table_name, "record_id": new_id})
        return new_id

    # Lookup

    @classmethod
    def find_by(cls: Type[M], field_name: str, value: Any) -> List[M]:
        """
        Return every row whose ``field_name`` equals ``value``, in engine order.

        Raises
        ------
        QueryError
            If ``field_name`` is not a column or the query fails.
        """
        schema, database = cls._bound()
        if not schema.has_column(field_name):
            raise QueryError(f"'{schema.table_name}' has no column '{field_name}'")
        sql, params = render_select_where(database.dialect, schema.table_name, field_name, value)
        try:
            rows = database.execute(sql, params)
        except DRIVER_ERRORS as exc:
            raise QueryError(f"Lookup on '{schema.table_name}.{field_name}' failed: {exc}") from exc
        return [cls._from_row(row) for row in rows]

    @classmethod
    def find_by_name(cls: Type[M], name: Any) -> List[M]:
        return cls.find_by("name", name)

    def to_dict(self) -> Dict[str, Any]:
        schema, _ = self._bound()
        return {name: self._values.get(name) for name in schema.column_names}

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={value!r}" for name, value in self.to_dict().items())
        return f"{type(self).__name__}({fields})"


__all__ = ["Column", "Model"]
