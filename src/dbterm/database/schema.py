"""Plain descriptions of tables, columns and indexes returned by introspection."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ColumnSchema:
    name: str
    data_type: str
    is_nullable: bool
    default: Optional[str] = None


@dataclass(frozen=True)
class IndexSchema:
    name: str
    columns: tuple[str, ...] = ()
    is_unique: bool = False


@dataclass(frozen=True)
class TableSchema:
    """Schema of a single table.

    ``indexes`` is never populated by the current backends and is always
    empty.
    """

    table_name: str
    columns: tuple[ColumnSchema, ...] = ()
    indexes: tuple[IndexSchema, ...] = field(default_factory=tuple)

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]
