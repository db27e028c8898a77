from .schema_graph import Edge, RelationType, SchemaGraph
from .builder import GraphBuilder
from .sorter import DependencySorter, sort_tables

__all__ = [
    "Edge",
    "RelationType",
    "SchemaGraph",
    "GraphBuilder",
    "DependencySorter",
    "sort_tables",
]
