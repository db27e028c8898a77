"""
sql2drizzle: конвертер SQL DDL (CREATE TABLE) в схему Drizzle ORM.

    from sql2drizzle import convert_sql
    print(convert_sql(open("schema.sql").read()))
"""

__version__ = "0.1.0"

from .converter import ConversionResult, SchemaConverter, convert_sql
from .core.config import GeneratorOptions, ParseOptions, load_config
from .core.models import Dialect, ParseResult, Table
from .dialects.registry import get_generator, get_parser, parse_sql_content

__all__ = [
    "__version__",
    "ConversionResult",
    "SchemaConverter",
    "convert_sql",
    "GeneratorOptions",
    "ParseOptions",
    "load_config",
    "Dialect",
    "ParseResult",
    "Table",
    "get_generator",
    "get_parser",
    "parse_sql_content",
]
