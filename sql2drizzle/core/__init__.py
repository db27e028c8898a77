# sql2drizzle/core/__init__.py

from .models import (
    Column,
    Constraint,
    ConstraintType,
    Diagnostic,
    Dialect,
    ForeignKey,
    Index,
    ParseResult,
    Table,
)

from .exceptions import (
    ConverterError,
    ParsingError,
    StatementParseError,
    ClauseParseError,
    UnsupportedFeatureError,
    CircularDependencyError,
    GenerationError,
    DialectNotSupportedError,
    ConfigurationError,
)

from .result import Outcome

__all__ = [
    # models
    "Column",
    "Constraint",
    "ConstraintType",
    "Diagnostic",
    "Dialect",
    "ForeignKey",
    "Index",
    "ParseResult",
    "Table",

    # exceptions
    "ConverterError",
    "ParsingError",
    "StatementParseError",
    "ClauseParseError",
    "UnsupportedFeatureError",
    "CircularDependencyError",
    "GenerationError",
    "DialectNotSupportedError",
    "ConfigurationError",

    "Outcome",
]
