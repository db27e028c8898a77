"""
Базовые классы диалекта: парсер DDL и генератор схемы.

Диалект задаётся парой (SchemaParser, SchemaGenerator) с атрибутом DIALECT.
Новый диалект добавляется регистрацией пары в DialectRegistry.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional, Sequence

from ..core.config import GeneratorOptions, ParseOptions
from ..core.models import Dialect, ParseResult, Table

if TYPE_CHECKING:
    from ..generator.types import GeneratedSchema


class SchemaParser(ABC):
    """Разбор DDL-текста одного диалекта в ParseResult."""

    DIALECT: Dialect = Dialect.POSTGRESQL

    def __init__(self, options: Optional[ParseOptions] = None):
        self.options = options or ParseOptions(dialect=self.DIALECT)

    @abstractmethod
    def parse_sql(self, content: str) -> ParseResult:
        raise NotImplementedError


class SchemaGenerator(ABC):
    """Генерация кода схемы из таблиц, уже упорядоченных по зависимостям."""

    DIALECT: Dialect = Dialect.POSTGRESQL

    def __init__(self, options: Optional[GeneratorOptions] = None):
        self.options = options or GeneratorOptions()

    @abstractmethod
    def generate_schema(self, tables: Sequence[Table]) -> "GeneratedSchema":
        raise NotImplementedError

    def generate(self, tables: Sequence[Table]) -> str:
        return self.generate_schema(tables).content
