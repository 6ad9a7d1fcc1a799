"""
Exception hierarchy for dynorm.

Every error raised by the mapper derives from `DynormError`. Driver exceptions
are never swallowed: they are wrapped into one of the kinds below and chained
with `raise ... from exc` so the original cause stays available.
"""

from __future__ import annotations

from typing import Iterable


class DynormError(Exception):
    """Base class for all mapper errors."""


class SchemaError(DynormError):
    """Table missing, catalog query failed, or a type is not bound to a schema."""


class UnknownFieldError(DynormError):
    """A record was constructed with names it cannot set: unknown columns or `id`."""

    def __init__(self, type_name: str, unknown: Iterable[str], known: Iterable[str]) -> None:
        self.type_name = type_name
        self.unknown = tuple(unknown)
        self.known = tuple(known)
        super().__init__(
            f"{type_name} cannot set field(s) {', '.join(self.unknown)}; "
            f"settable fields: {', '.join(self.known)}"
        )


class PersistenceError(DynormError):
    """An INSERT failed; the record is left unsaved."""


class QueryError(DynormError):
    """A lookup failed to execute; no partial results are returned."""


__all__ = [
    "DynormError",
    "SchemaError",
    "UnknownFieldError",
    "PersistenceError",
    "QueryError",
]
