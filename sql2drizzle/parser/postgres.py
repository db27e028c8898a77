"""
Парсер DDL-скриптов PostgreSQL.

Конвейер:
    текст → StatementSplitter → classify_statement (sqlparse)
          → TableExtractor → ClauseParser → Table

Ошибки отдельных операторов приходят как Outcome и собираются здесь:
- lenient (по умолчанию): ошибка → Diagnostic, оператор/определение пропускается;
- strict: первая ошибка выбрасывается.
Неподдерживаемые конструкции попадают в диагностику только при
ignore_unsupported = False.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Dict, List, Optional

from ..core.config import ParseOptions
from ..core.exceptions import ParsingError, StatementParseError, UnsupportedFeatureError, excerpt
from ..core.models import Column, Diagnostic, Dialect, ParseResult, Table
from ..dialects.base import SchemaParser
from .classifier import StatementKind, classify_statement
from .clause_parser import ClauseParser
from .extractor import ColumnComment, ExtractedIndex, TableExtractor
from .splitter import StatementSplitter
from .tokenizer import SQLTokenizer

logger = logging.getLogger(__name__)


class PostgreSQLParser(SchemaParser):
    DIALECT = Dialect.POSTGRESQL

    def __init__(self, options: Optional[ParseOptions] = None):
        super().__init__(options)
        tokenizer = SQLTokenizer()
        self.splitter = StatementSplitter()
        self.extractor = TableExtractor(tokenizer)
        self.clause_parser = ClauseParser(tokenizer)

    # ==========================================================
    # PUBLIC API
    # ==========================================================

    def parse_sql(self, content: str) -> ParseResult:
        tables: List[Table] = []
        indexes: List[ExtractedIndex] = []
        comments: List[ColumnComment] = []
        diagnostics: List[Diagnostic] = []

        for statement in self.splitter.split(content or ""):
            kind = classify_statement(statement)

            if kind == StatementKind.CREATE_TABLE:
                table = self._parse_table(statement, diagnostics)
                if table is None:
                    continue
                if any(t.name == table.name for t in tables):
                    self._report(
                        StatementParseError(f"duplicate table '{table.name}'", statement), diagnostics
                    )
                    continue
                tables.append(table)

            elif kind == StatementKind.CREATE_INDEX:
                outcome = self.extractor.extract_index(statement)
                if outcome.ok:
                    indexes.append(outcome.value)
                else:
                    self._report(outcome.error, diagnostics)

            elif kind == StatementKind.COMMENT:
                outcome = self.extractor.extract_comment(statement)
                if not outcome.ok:
                    self._report(outcome.error, diagnostics)
                elif outcome.value is not None:
                    comments.append(outcome.value)

            else:
                logger.debug("skipping statement: %s", excerpt(statement))

        tables = [self._attach(t, indexes, comments) for t in tables]
        logger.debug("parsed %d tables, %d diagnostics", len(tables), len(diagnostics))

        return ParseResult(tables=tuple(tables), diagnostics=tuple(diagnostics), dialect=self.DIALECT)

    # ==========================================================
    # INTERNAL
    # ==========================================================

    def _parse_table(self, statement: str, diagnostics: List[Diagnostic]) -> Optional[Table]:
        extracted = self.extractor.extract_table(statement)
        if not extracted.ok:
            self._report(extracted.error, diagnostics)
            return None

        outcome = self.clause_parser.parse_table(extracted.value, self.options.strict_mode)
        for warning in outcome.warnings:
            self._report(warning, diagnostics)
        if not outcome.ok:
            self._report(outcome.error, diagnostics)
            return None
        return outcome.value

    def _report(self, error: ParsingError, diagnostics: List[Diagnostic]) -> None:
        if self.options.strict_mode:
            raise error

        if isinstance(error, UnsupportedFeatureError) and self.options.ignore_unsupported:
            logger.debug("ignoring %s", error.message)
            return

        diagnostic = Diagnostic.from_error(error)
        logger.warning("%s", diagnostic)
        diagnostics.append(diagnostic)

    @staticmethod
    def _attach(table: Table, indexes: List[ExtractedIndex], comments: List[ColumnComment]) -> Table:
        """Индексы и комментарии колонок из отдельных операторов."""
        table_indexes = tuple(ix.index for ix in indexes if ix.table == table.name)

        by_column: Dict[str, Optional[str]] = {}
        for c in comments:
            if c.table != table.name:
                continue
            if not table.has_column(c.column):
                logger.debug("comment on unknown column %s.%s ignored", c.table, c.column)
                continue
            by_column[c.column] = c.text

        if not table_indexes and not by_column:
            return table

        columns: List[Column] = []
        for col in table.columns:
            if col.name in by_column:
                col = dataclasses.replace(col, comment=by_column[col.name])
            columns.append(col)

        return dataclasses.replace(
            table,
            columns=tuple(columns),
            indexes=table.indexes + table_indexes,
        )
