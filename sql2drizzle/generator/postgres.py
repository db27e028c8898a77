"""
Генератор схемы Drizzle ORM (drizzle-orm/pg-core) для PostgreSQL.

Ожидает таблицы уже в порядке зависимостей (см. graph.sorter).
Результат детерминирован: одинаковые таблицы и опции → одинаковый текст.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Set

from ..core.config import GeneratorOptions
from ..core.exceptions import GenerationError
from ..core.models import Column, Dialect, ForeignKey, Table
from ..dialects.base import SchemaGenerator
from ..utils.naming import convert_case, is_valid_identifier, property_access, property_key, quote_string
from .type_mapper import PostgreSQLTypeMapper
from .types import GeneratedSchema, GeneratedTable

logger = logging.getLogger(__name__)

IMPORT_SOURCE = "drizzle-orm/pg-core"
SELF_REFERENCE_TYPE = "AnyPgColumn"


class PostgreSQLSchemaGenerator(SchemaGenerator):
    DIALECT = Dialect.POSTGRESQL

    def __init__(
        self,
        options: Optional[GeneratorOptions] = None,
        type_mapper: Optional[PostgreSQLTypeMapper] = None,
    ):
        super().__init__(options)
        self.type_mapper = type_mapper or PostgreSQLTypeMapper()
        self._tables: Dict[str, Table] = {}

    # ==========================================================
    # PUBLIC API
    # ==========================================================

    def generate_schema(self, tables: Sequence[Table]) -> GeneratedSchema:
        self._tables = {t.name: t for t in tables}

        imports: Set[str] = {"pgTable"}
        for table in tables:
            for column in table.columns:
                imports.add(self.type_mapper.map_column(column).function)
            if any(self._is_self_reference(table, c) for c in table.columns):
                imports.add(SELF_REFERENCE_TYPE)

        import_line = f"import {{ {', '.join(sorted(imports))} }} from {quote_string(IMPORT_SOURCE)};"

        generated: List[GeneratedTable] = []
        exports: Dict[str, str] = {}
        for table in tables:
            table_code = self.generate_table(table)
            name = table_code.export_name
            if name in imports:
                raise GenerationError(
                    f"export '{name}' of table {table.name} collides with an import from {IMPORT_SOURCE}",
                    table=table.name,
                )
            if name in exports:
                raise GenerationError(
                    f"tables '{exports[name]}' and '{table.name}' both map to export '{name}'",
                    table=table.name,
                )
            exports[name] = table.name
            generated.append(table_code)
            logger.debug("generated table %s (%d columns)", table.name, len(table.columns))

        parts = [import_line, "\n\n"]
        for i, table_code in enumerate(generated):
            if i > 0:
                parts.append("\n")
            parts.append(table_code.definition)
            parts.append("\n")

        return GeneratedSchema(imports=(import_line,), tables=tuple(generated), content="".join(parts))

    def generate_table(self, table: Table) -> GeneratedTable:
        export_name = self.export_name(table.name)
        indent = self.options.indent

        lines: List[str] = []
        if self.options.include_comments:
            lines.append(f"// {table.name} table")
        lines.append(f"export const {export_name} = pgTable({quote_string(table.name)}, {{")

        keys: Dict[str, str] = {}
        entries: List[List[str]] = []
        for column in table.columns:
            key = self.column_key(column.name)
            if key in keys:
                raise GenerationError(
                    f"columns '{keys[key]}' and '{column.name}' both map to property '{key}'",
                    table=table.name,
                    column=column.name,
                )
            keys[key] = column.name

            entry: List[str] = []
            if self.options.include_comments and column.comment:
                for comment_line in column.comment.splitlines() or [""]:
                    entry.append(f"{indent}// {comment_line}".rstrip())
            entry.append(f"{indent}{property_key(key)}: {self._column_expression(table, column)}")
            entries.append(entry)

        for i, entry in enumerate(entries):
            if i < len(entries) - 1:
                entry[-1] += ","
            lines.extend(entry)

        lines.append("});")

        return GeneratedTable(original_name=table.name, export_name=export_name, definition="\n".join(lines))

    def export_name(self, table_name: str) -> str:
        name = self.options.identifier_prefix + convert_case(table_name, self.options.table_name_case)
        if not is_valid_identifier(name):
            raise GenerationError(
                f"'{name}' is not a valid TypeScript identifier for table {table_name}; "
                f"choose another table naming case or prefix",
                table=table_name,
            )
        return name

    def column_key(self, column_name: str) -> str:
        return convert_case(column_name, self.options.column_name_case)

    # ==========================================================
    # HELPERS
    # ==========================================================

    def _column_expression(self, table: Table, column: Column) -> str:
        code = self.type_mapper.map_column(column).render()

        if table.is_primary_key(column.name):
            code += ".primaryKey()"

        fk = self._foreign_key_for(table, column)
        if fk is not None:
            reference = self._reference(table, fk)
            if reference:
                code += reference

        return code

    @staticmethod
    def _foreign_key_for(table: Table, column: Column) -> Optional[ForeignKey]:
        # только FK из одной колонки; первый подходящий
        for fk in table.foreign_keys:
            if fk.is_single_column() and fk.columns[0] == column.name:
                return fk
        return None

    def _referenced_column(self, fk: ForeignKey) -> Optional[str]:
        if len(fk.referenced_columns) == 1:
            return fk.referenced_columns[0]
        if fk.referenced_columns:
            return None
        # REFERENCES t без списка колонок → первичный ключ t
        target = self._tables.get(fk.referenced_table)
        if target is not None and len(target.primary_key) == 1:
            return target.primary_key[0]
        return None

    def _reference(self, table: Table, fk: ForeignKey) -> Optional[str]:
        ref_column = self._referenced_column(fk)
        if ref_column is None:
            return None

        target = property_access(self.export_name(fk.referenced_table), self.column_key(ref_column))
        if fk.referenced_table == table.name:
            target_fn = f"(): {SELF_REFERENCE_TYPE} => {target}"
        else:
            target_fn = f"() => {target}"

        actions = []
        if fk.on_delete:
            actions.append(f"onDelete: {quote_string(fk.on_delete.lower())}")
        if fk.on_update:
            actions.append(f"onUpdate: {quote_string(fk.on_update.lower())}")
        if actions:
            return f".references({target_fn}, {{ {', '.join(actions)} }})"
        return f".references({target_fn})"

    def _is_self_reference(self, table: Table, column: Column) -> bool:
        fk = self._foreign_key_for(table, column)
        return (
            fk is not None
            and fk.referenced_table == table.name
            and self._referenced_column(fk) is not None
        )
