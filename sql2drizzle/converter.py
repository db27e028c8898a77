"""
Координатор конвертации SQL DDL → схема Drizzle ORM.

Этапы: парсинг → сортировка по зависимостям → генерация → (запись файла).
Время каждого этапа сохраняется в self.stats.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .core.config import (
    generator_options_from_config,
    parse_dialect,
    parse_options_from_config,
    resolve_config,
)
from .core.models import Diagnostic, ParseResult, Table
from .dialects.registry import get_generator, get_parser
from .generator.types import GeneratedSchema
from .graph.sorter import DependencySorter
from .utils.files import read_sql_file, write_schema_file

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    content: str
    schema: GeneratedSchema
    parse_result: ParseResult
    tables: List[Table] = field(default_factory=list)
    stats: Dict[str, float] = field(default_factory=dict)

    @property
    def diagnostics(self) -> Tuple[Diagnostic, ...]:
        return self.parse_result.diagnostics

    def summary(self) -> Dict[str, Any]:
        return {
            "tables": len(self.tables),
            "columns": sum(len(t.columns) for t in self.tables),
            "foreign_keys": sum(len(t.foreign_keys) for t in self.tables),
            "diagnostics": len(self.diagnostics),
            "order": [t.name for t in self.tables],
        }


class SchemaConverter:
    """
    Полный конвейер конвертации для одного DDL-текста.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = resolve_config(config)

        self.dialect = parse_dialect(self.config.get("dialect"))
        self.parse_options = parse_options_from_config(self.config)
        self.generator_options = generator_options_from_config(self.config)

        self.parser = get_parser(self.dialect, self.parse_options)
        self.generator = get_generator(self.dialect, self.generator_options)
        self.sorter = DependencySorter()

        self.stats: Dict[str, float] = {
            "parsing_time": 0.0,
            "sorting_time": 0.0,
            "generation_time": 0.0,
            "total_time": 0.0,
        }

    # ==========================================================
    # PUBLIC API
    # ==========================================================

    def convert(self, sql_text: str) -> ConversionResult:
        """
        SQL-текст → TypeScript-код схемы.
        Ошибки генерации и циклы внешних ключей выбрасываются всегда.
        """
        total_start = time.perf_counter()

        # ---------- Этап 1: Парсинг ----------
        t0 = time.perf_counter()
        parse_result = self.parser.parse_sql(sql_text)
        self.stats["parsing_time"] = time.perf_counter() - t0

        if not parse_result.tables:
            logger.warning("no CREATE TABLE statements found")

        # ---------- Этап 2: Порядок таблиц ----------
        t0 = time.perf_counter()
        ordered = self.sorter.sort(parse_result.tables)
        self.stats["sorting_time"] = time.perf_counter() - t0

        # ---------- Этап 3: Генерация ----------
        t0 = time.perf_counter()
        schema = self.generator.generate_schema(ordered)
        self.stats["generation_time"] = time.perf_counter() - t0

        self.stats["total_time"] = time.perf_counter() - total_start
        logger.debug(
            "conversion stages: parsing %.4fs, sorting %.4fs, generation %.4fs",
            self.stats["parsing_time"], self.stats["sorting_time"], self.stats["generation_time"],
        )

        return ConversionResult(
            content=schema.content,
            schema=schema,
            parse_result=parse_result,
            tables=ordered,
            stats=dict(self.stats),
        )

    def convert_file(self, input_path: Union[str, Path], output_path: Union[str, Path]) -> ConversionResult:
        """Читает SQL-файл, конвертирует и атомарно записывает результат."""
        sql_text = read_sql_file(input_path)
        result = self.convert(sql_text)
        write_schema_file(output_path, result.content)
        logger.debug("schema written to %s", output_path)
        return result


def convert_sql(sql_text: str, config: Optional[Dict[str, Any]] = None) -> str:
    """Конвертирует DDL-текст в код схемы Drizzle."""
    return SchemaConverter(config).convert(sql_text).content
