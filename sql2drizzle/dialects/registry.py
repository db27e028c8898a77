"""
Реестр диалектов.
Сопоставляет Dialect → (класс парсера, класс генератора).
"""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple, Type, Union

from ..core.config import GeneratorOptions, ParseOptions, parse_dialect
from ..core.exceptions import DialectNotSupportedError
from ..core.models import Dialect, ParseResult
from ..generator.postgres import PostgreSQLSchemaGenerator
from ..parser.postgres import PostgreSQLParser
from .base import SchemaGenerator, SchemaParser
from .unimplemented import MySQLGenerator, MySQLParser, SpannerGenerator, SpannerParser


class DialectRegistry:
    def __init__(self):
        self._entries: Dict[Dialect, Tuple[Type[SchemaParser], Type[SchemaGenerator]]] = {}

    def register(self, parser_class: Type[SchemaParser], generator_class: Type[SchemaGenerator]) -> None:
        if not issubclass(parser_class, SchemaParser):
            raise TypeError(f"{parser_class} must be a subclass of SchemaParser")
        if not issubclass(generator_class, SchemaGenerator):
            raise TypeError(f"{generator_class} must be a subclass of SchemaGenerator")
        if parser_class.DIALECT != generator_class.DIALECT:
            raise ValueError(
                f"dialect mismatch: {parser_class.__name__} is {parser_class.DIALECT.value}, "
                f"{generator_class.__name__} is {generator_class.DIALECT.value}"
            )
        self._entries[parser_class.DIALECT] = (parser_class, generator_class)

    def dialects(self) -> List[Dialect]:
        return list(self._entries)

    def _entry(self, dialect: Union[str, Dialect, None]) -> Tuple[Type[SchemaParser], Type[SchemaGenerator]]:
        resolved = parse_dialect(dialect)
        entry = self._entries.get(resolved)
        if entry is None:
            raise DialectNotSupportedError(resolved.value)
        return entry

    def get_parser(self, dialect: Union[str, Dialect, None] = None, options: Optional[ParseOptions] = None) -> SchemaParser:
        parser_class, _ = self._entry(dialect)
        return parser_class(options or ParseOptions(dialect=parser_class.DIALECT))

    def get_generator(
        self, dialect: Union[str, Dialect, None] = None, options: Optional[GeneratorOptions] = None
    ) -> SchemaGenerator:
        _, generator_class = self._entry(dialect)
        return generator_class(options)


DEFAULT_REGISTRY = DialectRegistry()
DEFAULT_REGISTRY.register(PostgreSQLParser, PostgreSQLSchemaGenerator)
DEFAULT_REGISTRY.register(MySQLParser, MySQLGenerator)
DEFAULT_REGISTRY.register(SpannerParser, SpannerGenerator)


def get_parser(dialect: Union[str, Dialect, None] = None, options: Optional[ParseOptions] = None) -> SchemaParser:
    return DEFAULT_REGISTRY.get_parser(dialect, options)


def get_generator(
    dialect: Union[str, Dialect, None] = None, options: Optional[GeneratorOptions] = None
) -> SchemaGenerator:
    return DEFAULT_REGISTRY.get_generator(dialect, options)


def parse_sql_content(
    content: str,
    dialect: Union[str, Dialect, None] = Dialect.POSTGRESQL,
    options: Optional[ParseOptions] = None,
) -> ParseResult:
    """Разбор DDL-текста парсером выбранного диалекта."""
    return get_parser(dialect, options).parse_sql(content)
