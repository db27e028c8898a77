"""
generator package: генерация схемы Drizzle ORM
"""

from .types import DrizzleType, GeneratedSchema, GeneratedTable
from .type_mapper import PostgreSQLTypeMapper
from .postgres import PostgreSQLSchemaGenerator

__all__ = [
    "DrizzleType",
    "GeneratedSchema",
    "GeneratedTable",
    "PostgreSQLTypeMapper",
    "PostgreSQLSchemaGenerator",
]
