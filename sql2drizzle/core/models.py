from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple


class Dialect(str, Enum):
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SPANNER = "spanner"


class ConstraintType(str, Enum):
    UNIQUE = "UNIQUE"
    CHECK = "CHECK"


@dataclass(frozen=True)
class Column:
    name: str
    type: str
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    not_null: bool = False
    unique: bool = False
    default_value: Optional[str] = None
    auto_increment: bool = False
    comment: Optional[str] = None
    array_dimensions: int = 0


@dataclass(frozen=True)
class ForeignKey:
    name: str
    columns: Tuple[str, ...]
    referenced_table: str
    referenced_columns: Tuple[str, ...] = ()
    on_delete: Optional[str] = None
    on_update: Optional[str] = None

    def is_single_column(self) -> bool:
        """Одна колонка ссылается на одну колонку; список целевых колонок может быть опущен."""
        return len(self.columns) == 1 and len(self.referenced_columns) <= 1


@dataclass(frozen=True)
class Index:
    name: str
    columns: Tuple[str, ...]
    unique: bool = False
    method: Optional[str] = None


@dataclass(frozen=True)
class Constraint:
    name: str
    type: ConstraintType
    columns: Tuple[str, ...] = ()
    expression: Optional[str] = None


@dataclass(frozen=True)
class Table:
    """
    Таблица после парсинга одного CREATE TABLE.

    Неизменяема: сортировщик переставляет ссылки на таблицы,
    генератор только читает их.
    """
    name: str
    columns: Tuple[Column, ...] = ()
    primary_key: Tuple[str, ...] = ()
    foreign_keys: Tuple[ForeignKey, ...] = ()
    indexes: Tuple[Index, ...] = ()
    constraints: Tuple[Constraint, ...] = ()
    schema: Optional[str] = None

    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def has_column(self, name: str) -> bool:
        return any(c.name == name for c in self.columns)

    def get_column(self, name: str) -> Optional[Column]:
        for c in self.columns:
            if c.name == name:
                return c
        return None

    def is_primary_key(self, column_name: str) -> bool:
        return column_name in self.primary_key

    def referenced_tables(self) -> Set[str]:
        return {fk.referenced_table for fk in self.foreign_keys}


@dataclass(frozen=True)
class Diagnostic:
    """Нефатальная ошибка, собранная в мягком режиме."""
    code: str
    message: str
    statement: Optional[str] = None
    table: Optional[str] = None

    @classmethod
    def from_error(cls, error: Any, table: Optional[str] = None) -> "Diagnostic":
        details: Dict[str, Any] = getattr(error, "details", {}) or {}
        return cls(
            code=getattr(error, "code", "UNKNOWN"),
            message=getattr(error, "message", str(error)),
            statement=details.get("sql_fragment"),
            table=table or details.get("table"),
        )

    def __str__(self) -> str:
        where = f" (table {self.table})" if self.table else ""
        frag = f": {self.statement}" if self.statement else ""
        return f"[{self.code}] {self.message}{where}{frag}"


@dataclass(frozen=True)
class ParseResult:
    tables: Tuple[Table, ...] = ()
    diagnostics: Tuple[Diagnostic, ...] = ()
    dialect: Dialect = Dialect.POSTGRESQL

    def get_table(self, name: str) -> Optional[Table]:
        for t in self.tables:
            if t.name == name:
                return t
        return None

    def table_names(self) -> List[str]:
        return [t.name for t in self.tables]


@dataclass
class TableDraft:
    """
    Изменяемая заготовка таблицы, пока идёт разбор её тела.
    После разбора превращается в неизменяемую Table через freeze().
    """
    name: str
    schema: Optional[str] = None
    columns: List[Column] = field(default_factory=list)
    primary_key: List[str] = field(default_factory=list)
    foreign_keys: List[ForeignKey] = field(default_factory=list)
    indexes: List[Index] = field(default_factory=list)
    constraints: List[Constraint] = field(default_factory=list)

    def add_primary_key(self, columns: List[str]) -> None:
        for col in columns:
            if col not in self.primary_key:
                self.primary_key.append(col)

    def freeze(self) -> Table:
        return Table(
            name=self.name,
            schema=self.schema,
            columns=tuple(self.columns),
            primary_key=tuple(self.primary_key),
            foreign_keys=tuple(self.foreign_keys),
            indexes=tuple(self.indexes),
            constraints=tuple(self.constraints),
        )
