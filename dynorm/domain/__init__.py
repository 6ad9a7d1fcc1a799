"""
Domain package for dynorm.

Exports the table metadata model shared by the schema introspector and the
record mapper. Keep this package focused on data definitions.
"""

from dynorm.domain.models import PRIMARY_KEY, TypeSchema

__all__ = [
    "PRIMARY_KEY",
    "TypeSchema",
]
