"""
Отображение типов PostgreSQL → конструкторы drizzle-orm/pg-core.

Таблица TYPE_TABLE задаёт для каждого канонического типа:
- имя функции Drizzle,
- как length / precision / scale превращаются в объект опций,
- serial-аналог для автоинкремента (INTEGER → serial, BIGINT → bigserial),
- относится ли тип ко времени (для defaultNow()).
Псевдонимы (INT4, FLOAT8, TIMESTAMPTZ, ...) сводятся к каноническим именам.
Неизвестный тип → text: у каждой колонки всегда есть описание.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from ..core.models import Column
from ..parser.tokenizer import (
    SQLTokenizer,
    Token,
    TokenType,
    string_literal_value,
    strip_cast,
    strip_parens,
)
from ..utils.naming import quote_string
from .types import DrizzleType

logger = logging.getLogger(__name__)


class ArgStyle(Enum):
    NONE = "none"
    MODE_NUMBER = "mode_number"          # { mode: 'number' }
    LENGTH = "length"                    # { length: n }
    PRECISION_SCALE = "precision_scale"  # { precision: p, scale: s }
    TEMPORAL = "temporal"                # { precision: p, withTimezone: true }


@dataclass(frozen=True)
class TypeSpec:
    function: str
    args: ArgStyle = ArgStyle.NONE
    serial: Optional[str] = None
    temporal: bool = False
    with_timezone: bool = False


TYPE_TABLE: Dict[str, TypeSpec] = {
    # Целочисленные
    "BIGSERIAL": TypeSpec("bigserial", ArgStyle.MODE_NUMBER),
    "SERIAL": TypeSpec("serial"),
    "SMALLSERIAL": TypeSpec("smallserial"),
    "BIGINT": TypeSpec("bigint", ArgStyle.MODE_NUMBER, serial="BIGSERIAL"),
    "INTEGER": TypeSpec("integer", serial="SERIAL"),
    "SMALLINT": TypeSpec("smallint", serial="SMALLSERIAL"),

    # Строковые
    "VARCHAR": TypeSpec("varchar", ArgStyle.LENGTH),
    "CHAR": TypeSpec("char", ArgStyle.LENGTH),
    "TEXT": TypeSpec("text"),

    "BOOLEAN": TypeSpec("boolean"),

    # Дата и время
    "TIMESTAMP": TypeSpec("timestamp", ArgStyle.TEMPORAL, temporal=True),
    "TIMESTAMPTZ": TypeSpec("timestamp", ArgStyle.TEMPORAL, temporal=True, with_timezone=True),
    "DATE": TypeSpec("date", temporal=True),
    "TIME": TypeSpec("time", ArgStyle.TEMPORAL, temporal=True),
    "TIMETZ": TypeSpec("time", ArgStyle.TEMPORAL, temporal=True, with_timezone=True),
    "INTERVAL": TypeSpec("interval"),

    # Числа с фиксированной и плавающей точкой
    "DECIMAL": TypeSpec("decimal", ArgStyle.PRECISION_SCALE),
    "REAL": TypeSpec("real"),
    "DOUBLE PRECISION": TypeSpec("doublePrecision"),

    "UUID": TypeSpec("uuid"),
    "JSON": TypeSpec("json"),
    "JSONB": TypeSpec("jsonb"),

    # Сетевые
    "INET": TypeSpec("inet"),
    "CIDR": TypeSpec("cidr"),
    "MACADDR": TypeSpec("macaddr"),
}

TYPE_ALIASES: Dict[str, str] = {
    "SERIAL8": "BIGSERIAL",
    "SERIAL4": "SERIAL",
    "SERIAL2": "SMALLSERIAL",
    "INT8": "BIGINT",
    "INT": "INTEGER",
    "INT4": "INTEGER",
    "INT2": "SMALLINT",
    "CHARACTER VARYING": "VARCHAR",
    "CHARACTER": "CHAR",
    "BPCHAR": "CHAR",
    "BOOL": "BOOLEAN",
    "TIMESTAMP WITHOUT TIME ZONE": "TIMESTAMP",
    "TIMESTAMP WITH TIME ZONE": "TIMESTAMPTZ",
    "TIME WITHOUT TIME ZONE": "TIME",
    "TIME WITH TIME ZONE": "TIMETZ",
    "NUMERIC": "DECIMAL",
    "FLOAT4": "REAL",
    "DOUBLE": "DOUBLE PRECISION",
    "FLOAT8": "DOUBLE PRECISION",
    "FLOAT": "DOUBLE PRECISION",
}

FALLBACK_TYPE = "TEXT"

# выражения "текущее время" для defaultNow()
_NOW_KEYWORDS = {"CURRENT_TIMESTAMP", "LOCALTIMESTAMP", "CURRENT_DATE", "CURRENT_TIME", "LOCALTIME"}
_NOW_FUNCTIONS = {"NOW", "TRANSACTION_TIMESTAMP", "STATEMENT_TIMESTAMP", "CLOCK_TIMESTAMP"}


class PostgreSQLTypeMapper:
    def __init__(self, tokenizer: Optional[SQLTokenizer] = None):
        self.tokenizer = tokenizer or SQLTokenizer()

    # ==========================================================
    # PUBLIC API
    # ==========================================================

    @staticmethod
    def resolve(type_name: str) -> TypeSpec:
        key = " ".join((type_name or "").upper().split())
        key = TYPE_ALIASES.get(key, key)
        return TYPE_TABLE.get(key) or TYPE_TABLE[FALLBACK_TYPE]

    @staticmethod
    def is_known_type(type_name: str) -> bool:
        key = " ".join((type_name or "").upper().split())
        return TYPE_ALIASES.get(key, key) in TYPE_TABLE

    def map_column(self, column: Column) -> DrizzleType:
        """Column → DrizzleType; Column не изменяется."""
        if not self.is_known_type(column.type):
            logger.debug("unknown type %s of column %s, mapped to text", column.type, column.name)
        spec = self.resolve(column.type)
        if column.auto_increment and spec.serial:
            spec = TYPE_TABLE[spec.serial]

        args = [quote_string(column.name)]
        options = self._options(spec, column)
        if options:
            args.append("{ " + ", ".join(options) + " }")

        return DrizzleType(
            function=spec.function,
            args=tuple(args),
            modifiers=tuple(self._modifiers(spec, column)),
        )

    def classify_default(self, expression: str, temporal: bool = False) -> Optional[str]:
        """
        Модификатор для DEFAULT по упорядоченным правилам:
        1) now()/CURRENT_TIMESTAMP у временного типа → defaultNow()
        2) TRUE / FALSE → default(true|false)
        3) строковый литерал → default('...')
        4) число со знаком → default(n)
        5) остальное → default('<выражение как есть>')
        Завершающее приведение типа (::type) отбрасывается до сопоставления.
        """
        raw = (expression or "").strip()
        if not raw:
            return None

        tokens = strip_parens(strip_cast(self._tokens(raw)))

        if temporal and _is_now(tokens):
            return "defaultNow()"

        if len(tokens) == 1 and tokens[0].is_keyword("TRUE", "FALSE"):
            return f"default({tokens[0].value.lower()})"

        if len(tokens) == 1 and tokens[0].type == TokenType.STRING:
            return f"default({quote_string(string_literal_value(tokens[0]))})"

        number = _signed_number(tokens)
        if number is not None:
            return f"default({number})"

        return f"default({quote_string(raw)})"

    # ==========================================================
    # HELPERS
    # ==========================================================

    @staticmethod
    def _options(spec: TypeSpec, column: Column) -> List[str]:
        if spec.args == ArgStyle.MODE_NUMBER:
            return ["mode: 'number'"]
        if spec.args == ArgStyle.LENGTH and column.length is not None:
            return [f"length: {column.length}"]
        if spec.args == ArgStyle.PRECISION_SCALE and column.precision is not None:
            if column.scale is not None:
                return [f"precision: {column.precision}", f"scale: {column.scale}"]
            return [f"precision: {column.precision}"]
        if spec.args == ArgStyle.TEMPORAL:
            options = []
            if column.precision is not None:
                options.append(f"precision: {column.precision}")
            if spec.with_timezone:
                options.append("withTimezone: true")
            return options
        return []

    def _modifiers(self, spec: TypeSpec, column: Column) -> List[str]:
        # порядок фиксирован: array → notNull → unique → default
        modifiers = ["array()"] * column.array_dimensions
        if column.not_null:
            modifiers.append("notNull()")
        if column.unique:
            modifiers.append("unique()")
        if column.default_value is not None:
            default = self.classify_default(column.default_value, spec.temporal)
            if default:
                modifiers.append(default)
        return modifiers

    def _tokens(self, text: str) -> List[Token]:
        return [t for t in self.tokenizer.tokenize(text) if t.type != TokenType.EOF]


def _is_now(tokens: List[Token]) -> bool:
    if not tokens or not tokens[0].is_word():
        return False
    head = tokens[0].upper
    rest = [t.type for t in tokens[1:]]

    if head in _NOW_KEYWORDS:
        # CURRENT_TIMESTAMP или CURRENT_TIMESTAMP(3)
        return not rest or rest == [TokenType.LPAREN, TokenType.NUMBER, TokenType.RPAREN]
    if head in _NOW_FUNCTIONS:
        return rest == [TokenType.LPAREN, TokenType.RPAREN]
    return False


def _signed_number(tokens: List[Token]) -> Optional[str]:
    sign = ""
    if len(tokens) == 2 and tokens[0].type == TokenType.OPERATOR and tokens[0].value in ("-", "+"):
        sign = "-" if tokens[0].value == "-" else ""
        tokens = tokens[1:]
    if len(tokens) == 1 and tokens[0].type == TokenType.NUMBER:
        return sign + tokens[0].value
    return None
