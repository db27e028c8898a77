"""
Результаты генерации: описание типа колонки Drizzle и сгенерированный код.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class DrizzleType:
    """
    Конструктор колонки Drizzle: имя функции, аргументы и цепочка модификаторов.

    DrizzleType("varchar", ("'name'", "{ length: 255 }"), ("notNull()",))
        → varchar('name', { length: 255 }).notNull()
    """
    function: str
    args: Tuple[str, ...] = ()
    modifiers: Tuple[str, ...] = ()

    def render(self) -> str:
        chain = "".join(f".{m}" for m in self.modifiers)
        return f"{self.function}({', '.join(self.args)}){chain}"


@dataclass(frozen=True)
class GeneratedTable:
    original_name: str
    export_name: str
    definition: str


@dataclass(frozen=True)
class GeneratedSchema:
    imports: Tuple[str, ...]
    tables: Tuple[GeneratedTable, ...]
    content: str

    def table_names(self) -> Tuple[str, ...]:
        return tuple(t.original_name for t in self.tables)
