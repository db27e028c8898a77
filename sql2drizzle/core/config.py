"""
Конфигурация конвертера.

Конфигурация: обычный dict с дефолтами. Может быть загружена из YAML,
флаги командной строки перекрывают значения из файла:

    dialect: postgresql
    parse:
      strict_mode: false
      ignore_unsupported: true
    generate:
      table_name_case: camel
      column_name_case: camel
      include_comments: true
      identifier_prefix: ""
      indent_width: 2
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .exceptions import ConfigurationError, ConversionFileNotFoundError
from .models import Dialect
from ..utils.naming import NamingCase


DEFAULT_CONFIG: Dict[str, Any] = {
    "dialect": Dialect.POSTGRESQL.value,
    "parse": {
        "strict_mode": False,
        "ignore_unsupported": True,
    },
    "generate": {
        "table_name_case": NamingCase.CAMEL.value,
        "column_name_case": NamingCase.CAMEL.value,
        "include_comments": True,
        "identifier_prefix": "",
        "indent_width": 2,
    },
}

DIALECT_ALIASES: Dict[str, Dialect] = {
    "postgresql": Dialect.POSTGRESQL,
    "postgres": Dialect.POSTGRESQL,
    "pg": Dialect.POSTGRESQL,
    "mysql": Dialect.MYSQL,
    "spanner": Dialect.SPANNER,
}


def parse_dialect(value: Union[str, Dialect, None]) -> Dialect:
    if value is None or value == "":
        return Dialect.POSTGRESQL
    if isinstance(value, Dialect):
        return value
    dialect = DIALECT_ALIASES.get(str(value).strip().lower())
    if dialect is None:
        raise ConfigurationError(
            f"Unsupported dialect '{value}'. Supported dialects: postgresql, mysql, spanner",
            config_key="dialect",
            config_value=value,
        )
    return dialect


def parse_naming_case(value: Union[str, NamingCase], key: str = "naming_case") -> NamingCase:
    if isinstance(value, NamingCase):
        return value
    try:
        return NamingCase(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(c.value for c in NamingCase)
        raise ConfigurationError(
            f"Unknown naming case '{value}' (expected one of: {allowed})",
            config_key=key,
            config_value=value,
        )


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "yes", "1", "on"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "no", "0", "off"):
        return False
    raise ConfigurationError(f"'{key}' must be a boolean", config_key=key, config_value=value)


@dataclass(frozen=True)
class ParseOptions:
    dialect: Dialect = Dialect.POSTGRESQL
    # строгий режим: первая ошибка разбора прерывает весь разбор
    strict_mode: bool = False
    # мягкий режим: неподдерживаемые конструкции молча отбрасываются
    ignore_unsupported: bool = True

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], dialect: Union[str, Dialect, None] = None) -> "ParseOptions":
        data = data or {}
        return cls(
            dialect=parse_dialect(dialect if dialect is not None else data.get("dialect")),
            strict_mode=_as_bool(data.get("strict_mode", False), "parse.strict_mode"),
            ignore_unsupported=_as_bool(data.get("ignore_unsupported", True), "parse.ignore_unsupported"),
        )


@dataclass(frozen=True)
class GeneratorOptions:
    table_name_case: NamingCase = NamingCase.CAMEL
    column_name_case: NamingCase = NamingCase.CAMEL
    include_comments: bool = True
    identifier_prefix: str = ""
    indent_width: int = 2

    def __post_init__(self) -> None:
        if self.indent_width < 0:
            raise ConfigurationError(
                "indent_width must not be negative",
                config_key="generate.indent_width",
                config_value=self.indent_width,
            )

    @property
    def indent(self) -> str:
        return " " * self.indent_width

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "GeneratorOptions":
        data = data or {}
        indent = data.get("indent_width", 2)
        try:
            indent = int(indent)
        except (TypeError, ValueError):
            raise ConfigurationError(
                "indent_width must be an integer",
                config_key="generate.indent_width",
                config_value=indent,
            )
        return cls(
            table_name_case=parse_naming_case(
                data.get("table_name_case", NamingCase.CAMEL), "generate.table_name_case"
            ),
            column_name_case=parse_naming_case(
                data.get("column_name_case", NamingCase.CAMEL), "generate.column_name_case"
            ),
            include_comments=_as_bool(data.get("include_comments", True), "generate.include_comments"),
            identifier_prefix=str(data.get("identifier_prefix") or ""),
            indent_width=indent,
        )


# ==========================================================
# LOADING / MERGING
# ==========================================================

def merge_config(base: Dict[str, Any], overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Глубокое слияние: значения overrides побеждают, None пропускаются."""
    result = copy.deepcopy(base)
    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_config(result[key], value)
        else:
            result[key] = value
    return result


def resolve_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Конфигурация с применёнными дефолтами."""
    if config is not None and not isinstance(config, dict):
        raise ConfigurationError("configuration must be a mapping")
    for section in ("parse", "generate"):
        value = (config or {}).get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigurationError(f"'{section}' section must be a mapping", config_key=section)
    return merge_config(DEFAULT_CONFIG, config)


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Читает YAML-файл конфигурации (без применения дефолтов)."""
    p = Path(path)
    if not p.exists():
        raise ConversionFileNotFoundError(str(p))

    try:
        with open(p, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML in {p}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"configuration file {p} must contain a mapping")
    return data


def parse_options_from_config(config: Dict[str, Any]) -> ParseOptions:
    return ParseOptions.from_dict(config.get("parse"), dialect=config.get("dialect"))


def generator_options_from_config(config: Dict[str, Any]) -> GeneratorOptions:
    return GeneratorOptions.from_dict(config.get("generate"))
