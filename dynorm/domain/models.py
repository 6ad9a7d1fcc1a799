"""
Domain models for dynorm.

`TypeSchema` is the table metadata shared by every instance of one mapped
type. It is built once from the schema catalog and never refreshed.
"""
from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, Field

PRIMARY_KEY = "id"


class TypeSchema(BaseModel):
    """
    Table name and column list of one mapped type.
    """

    table_name: str = Field(..., min_length=1, description="Backing table name.")
    column_names: Tuple[str, ...] = Field(
        ..., description="Column names in catalog order, may include `id`."
    )

    model_config = {
        "frozen": True,
    }

    @property
    def insertable_columns(self) -> Tuple[str, ...]:
        """Columns an INSERT may write: everything but the generated primary key."""
        return tuple(name for name in self.column_names if name != PRIMARY_KEY)

    def has_column(self, name: str) -> bool:
        return name in self.column_names


__all__ = ["PRIMARY_KEY", "TypeSchema"]
