# sql2drizzle/graph/schema_graph.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Set

from ..core.models import Table


class RelationType(str, Enum):
    # src ссылается на dst внешним ключом
    REFERENCES = "REFERENCES"


@dataclass(frozen=True)
class Edge:
    src: int
    dst: int
    relation: RelationType
    foreign_key: str = ""


class SchemaGraph:
    """
    Ориентированный граф зависимостей таблиц.
    Вершины нумеруются в порядке добавления, порядок сохраняется.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._next_id: int = 1
        self.vertices: Dict[int, Table] = {}
        self._ids_by_name: Dict[str, int] = {}
        self.edges: Set[Edge] = set()

    # ==========
    # ВЕРШИНЫ
    # ==========

    def add_vertex(self, table: Table) -> int:
        if table.name in self._ids_by_name:
            raise ValueError(f"Table {table.name!r} is already in the graph")
        vertex_id = self._next_id
        self.vertices[vertex_id] = table
        self._ids_by_name[table.name] = vertex_id
        self._next_id += 1
        return vertex_id

    def get_vertex(self, vertex_id: int) -> Optional[Table]:
        return self.vertices.get(vertex_id)

    def find_id(self, table_name: str) -> Optional[int]:
        return self._ids_by_name.get(table_name)

    def has_table(self, table_name: str) -> bool:
        return table_name in self._ids_by_name

    def tables(self) -> List[Table]:
        """Таблицы в порядке добавления."""
        return [self.vertices[i] for i in sorted(self.vertices)]

    # ==========
    # РЁБРА
    # ==========

    def add_edge(self, src_id: int, dst_id: int, relation: RelationType, foreign_key: str = "") -> None:
        if src_id not in self.vertices or dst_id not in self.vertices:
            raise ValueError("Both vertices must exist before adding an edge")

        self.edges.add(Edge(src=src_id, dst=dst_id, relation=relation, foreign_key=foreign_key))

    def get_outgoing(self, vertex_id: int, relation: Optional[RelationType] = None) -> List[Edge]:
        # сортировка по dst и имени FK: обход не зависит от порядка в set
        found = [
            e for e in self.edges
            if e.src == vertex_id and (relation is None or e.relation == relation)
        ]
        return sorted(found, key=lambda e: (e.dst, e.foreign_key))

    # ==========
    # ЗАВИСИМОСТИ
    # ==========

    def get_dependencies(self, table_name: str) -> List[str]:
        """Таблицы, на которые ссылается table_name (без повторов)."""
        vertex_id = self.find_id(table_name)
        if vertex_id is None:
            return []
        result: List[str] = []
        for e in self.get_outgoing(vertex_id, RelationType.REFERENCES):
            name = self.vertices[e.dst].name
            if name not in result:
                result.append(name)
        return result
