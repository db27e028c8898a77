"""Зарегистрированные, но не реализованные диалекты."""
from __future__ import annotations

from typing import Sequence

from ..core.exceptions import DialectNotSupportedError
from ..core.models import Dialect, ParseResult, Table
from ..generator.types import GeneratedSchema
from .base import SchemaGenerator, SchemaParser


def _not_implemented(dialect: Dialect) -> DialectNotSupportedError:
    return DialectNotSupportedError(
        dialect.value, f"{dialect.value} dialect is not implemented yet (supported: postgresql)"
    )


class MySQLParser(SchemaParser):
    DIALECT = Dialect.MYSQL

    def parse_sql(self, content: str) -> ParseResult:
        raise _not_implemented(self.DIALECT)


class MySQLGenerator(SchemaGenerator):
    DIALECT = Dialect.MYSQL

    def generate_schema(self, tables: Sequence[Table]) -> GeneratedSchema:
        raise _not_implemented(self.DIALECT)


class SpannerParser(SchemaParser):
    DIALECT = Dialect.SPANNER

    def parse_sql(self, content: str) -> ParseResult:
        raise _not_implemented(self.DIALECT)


class SpannerGenerator(SchemaGenerator):
    DIALECT = Dialect.SPANNER

    def generate_schema(self, tables: Sequence[Table]) -> GeneratedSchema:
        raise _not_implemented(self.DIALECT)
