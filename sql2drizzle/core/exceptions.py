"""
Пользовательские исключения конвертера SQL DDL → Drizzle ORM.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, List


def excerpt(text: Optional[str], limit: int = 80) -> Optional[str]:
    if text is None:
        return None
    s = " ".join(text.split())
    if len(s) > limit:
        s = s[: limit - 3] + "..."
    return s


class ConverterError(Exception):
    """Базовое исключение конвертера."""

    def __init__(self, message: str, code: str = "UNKNOWN", details: Optional[dict] = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }


class ParsingError(ConverterError):
    """Ошибка парсинга SQL."""

    def __init__(self, message: str, sql_fragment: str = None, position: int = None):
        details: Dict[str, Any] = {}
        if sql_fragment:
            details["sql_fragment"] = excerpt(sql_fragment)
        if position is not None:
            details["position"] = position
        super().__init__(message, "PARSING_ERROR", details)

    @property
    def sql_fragment(self) -> Optional[str]:
        return self.details.get("sql_fragment")


class StatementParseError(ParsingError):
    """Оператор не распознаётся как CREATE TABLE либо его тело не сбалансировано."""

    def __init__(self, message: str, statement: str = None, position: int = None):
        super().__init__(message, sql_fragment=statement, position=position)
        self.code = "STATEMENT_PARSE_ERROR"


class ClauseParseError(ParsingError):
    """Определение колонки или ограничения не соответствует ожидаемой форме."""

    def __init__(
        self,
        message: str,
        clause: str = None,
        table: str = None,
        expected: str = None,
        found: str = None,
        position: int = None,
    ):
        super().__init__(message, sql_fragment=clause, position=position)
        self.code = "CLAUSE_PARSE_ERROR"
        if table:
            self.details["table"] = table
        if expected:
            self.details["expected"] = expected
        if found:
            self.details["found"] = found


class UnsupportedFeatureError(ParsingError):
    """Неподдерживаемая конструкция PostgreSQL."""

    def __init__(self, feature: str, clause: str = None, table: str = None):
        message = f"Unsupported feature: {feature}"
        super().__init__(message, sql_fragment=clause, position=None)
        self.code = "UNSUPPORTED_FEATURE"
        self.details["feature"] = feature
        if table:
            self.details["table"] = table


class GraphBuildingError(ConverterError):
    """Ошибка построения графа зависимостей."""

    def __init__(self, message: str, object_type: str = None, object_name: str = None):
        details: Dict[str, Any] = {}
        if object_type:
            details["object_type"] = object_type
        if object_name:
            details["object_name"] = object_name
        super().__init__(message, "GRAPH_BUILDING_ERROR", details)


class CircularDependencyError(GraphBuildingError):
    """Обнаружена циклическая зависимость между таблицами."""

    def __init__(self, cycle: List[str]):
        message = f"Circular foreign key dependency: {' -> '.join(cycle)}"
        super().__init__(message, object_type="table", object_name=cycle[0] if cycle else None)
        self.code = "CIRCULAR_DEPENDENCY"
        self.cycle = list(cycle)
        self.details["cycle"] = self.cycle


class GenerationError(ConverterError):
    """Колонку или таблицу невозможно отрендерить."""

    def __init__(self, message: str, table: str = None, column: str = None):
        details: Dict[str, Any] = {}
        if table:
            details["table"] = table
        if column:
            details["column"] = column
        super().__init__(message, "GENERATION_ERROR", details)


class DialectNotSupportedError(ConverterError):
    """Диалект объявлен, но не реализован (или неизвестен)."""

    def __init__(self, dialect: str, reason: str = None):
        message = reason or f"unsupported database dialect: {dialect}"
        super().__init__(message, "DIALECT_NOT_SUPPORTED", {"dialect": dialect})


class ConfigurationError(ConverterError):
    """Ошибка конфигурации."""

    def __init__(self, message: str, config_key: str = None, config_value: str = None):
        details: Dict[str, Any] = {}
        if config_key:
            details["config_key"] = config_key
        if config_value is not None:
            details["config_value"] = str(config_value)
        super().__init__(message, "CONFIGURATION_ERROR", details)


class FileSystemError(ConverterError):
    """Ошибка файловой системы."""

    def __init__(self, message: str, file_path: str = None, operation: str = None):
        details: Dict[str, Any] = {}
        if file_path:
            details["file_path"] = file_path
        if operation:
            details["operation"] = operation
        super().__init__(message, "FILESYSTEM_ERROR", details)


# НЕ переопределяем встроенный FileNotFoundError: даём уникальное имя
class ConversionFileNotFoundError(FileSystemError):
    """Файл не найден."""

    def __init__(self, file_path: str):
        super().__init__(f"file not found: {file_path}", file_path, "read")


def handle_exception(exception: Exception) -> dict:
    if isinstance(exception, ConverterError):
        return exception.to_dict()
    return {
        "error": str(exception),
        "code": "UNKNOWN_ERROR",
        "details": {
            "exception_type": exception.__class__.__name__,
        },
    }
