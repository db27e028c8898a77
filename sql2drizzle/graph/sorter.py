"""
Топологическая сортировка таблиц по внешним ключам.

Поиск в глубину в исходном порядке таблиц: перед таблицей выводятся все
таблицы, на которые она ссылается. Повторный вход в таблицу, обход которой
ещё не завершён, означает цикл.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..core.exceptions import CircularDependencyError
from ..core.models import Table
from .builder import GraphBuilder
from .schema_graph import SchemaGraph

_VISITING = 1
_VISITED = 2


class DependencySorter:
    def __init__(self, builder: Optional[GraphBuilder] = None):
        self.builder = builder or GraphBuilder()

    def sort(self, tables: Sequence[Table]) -> List[Table]:
        graph = self.builder.build_from_tables(tables)
        return self.sort_graph(graph)

    def sort_graph(self, graph: SchemaGraph) -> List[Table]:
        state: Dict[str, int] = {}
        path: List[str] = []
        ordered: List[Table] = []

        def visit(name: str) -> None:
            mark = state.get(name)
            if mark == _VISITED:
                return
            if mark == _VISITING:
                start = path.index(name)
                raise CircularDependencyError(path[start:] + [name])

            state[name] = _VISITING
            path.append(name)
            for dependency in graph.get_dependencies(name):
                visit(dependency)
            path.pop()
            state[name] = _VISITED
            ordered.append(graph.get_vertex(graph.find_id(name)))

        for table in graph.tables():
            visit(table.name)

        return ordered


def sort_tables(tables: Sequence[Table]) -> List[Table]:
    """Таблицы в порядке: сначала те, на которые ссылаются."""
    return DependencySorter().sort(tables)
