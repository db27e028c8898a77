"""
Диалекты SQL. Реестр: sql2drizzle.dialects.registry.
"""

from .base import SchemaGenerator, SchemaParser

__all__ = ["SchemaGenerator", "SchemaParser"]
