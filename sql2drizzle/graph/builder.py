# sql2drizzle/graph/builder.py

from __future__ import annotations

import logging
from typing import Sequence

from ..core.exceptions import GraphBuildingError
from ..core.models import Table
from .schema_graph import RelationType, SchemaGraph

logger = logging.getLogger(__name__)


class GraphBuilder:
    """
    Строит граф зависимостей таблиц: G = (V, E).

    V: таблицы, E: рёбра REFERENCES по внешним ключам.
    Ссылки на отсутствующие таблицы и ссылки таблицы на саму себя
    рёбер не дают: первые считаются удовлетворёнными, вторые отложены
    в Drizzle через () => ...
    """

    def build_from_tables(self, tables: Sequence[Table], name: str = "") -> SchemaGraph:
        graph = SchemaGraph(name=name)

        # ---------- TABLES ----------
        for table in tables:
            try:
                graph.add_vertex(table)
            except ValueError as e:
                raise GraphBuildingError(str(e), object_type="table", object_name=table.name)

        # ---------- FOREIGN KEYS ----------
        for table in tables:
            src_id = graph.find_id(table.name)
            for fk in table.foreign_keys:
                if fk.referenced_table == table.name:
                    continue
                if not graph.has_table(fk.referenced_table):
                    logger.debug(
                        "foreign key %s references unknown table %s, ignored for ordering",
                        fk.name, fk.referenced_table,
                    )
                    continue
                dst_id = graph.find_id(fk.referenced_table)
                graph.add_edge(src_id, dst_id, RelationType.REFERENCES, fk.name)

        return graph
