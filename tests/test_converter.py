"""
SchemaConverter and dialect registry tests.

Run with:
    pytest tests/test_converter.py -v
"""

import logging

import pytest

from sql2drizzle import SchemaConverter, convert_sql, parse_sql_content
from sql2drizzle.core.exceptions import (
    CircularDependencyError,
    ClauseParseError,
    ConfigurationError,
    DialectNotSupportedError,
)
from sql2drizzle.core.models import Dialect
from sql2drizzle.dialects.registry import DialectRegistry, get_generator, get_parser
from sql2drizzle.dialects.unimplemented import MySQLGenerator, SpannerParser
from sql2drizzle.generator.postgres import PostgreSQLSchemaGenerator
from sql2drizzle.parser.postgres import PostgreSQLParser


CYCLE_SQL = """
CREATE TABLE a (id INTEGER PRIMARY KEY, b_id INTEGER REFERENCES b(id));
CREATE TABLE b (id INTEGER PRIMARY KEY, a_id INTEGER REFERENCES a(id));
"""

BAD_CLAUSE_SQL = "CREATE TABLE t (id INTEGER, 123bad TEXT);"


class TestSchemaConverter:

    def test_convert_sql(self, users_sql):
        content = convert_sql(users_sql)
        assert content.startswith("import { bigserial, pgTable, varchar } from 'drizzle-orm/pg-core';\n\n")
        assert "  id: bigserial('id', { mode: 'number' }).notNull().primaryKey()," in content

    def test_summary(self, blog_sql):
        result = SchemaConverter().convert(blog_sql)

        assert result.summary() == {
            "tables": 3,
            "columns": 11,
            "foreign_keys": 3,
            "diagnostics": 0,
            "order": ["users", "posts", "comments"],
        }
        assert result.content == result.schema.content
        assert result.parse_result.table_names() == ["comments", "posts", "users"]

    def test_stats(self, users_sql):
        converter = SchemaConverter()
        result = converter.convert(users_sql)

        assert set(result.stats) == {"parsing_time", "sorting_time", "generation_time", "total_time"}
        assert result.stats["total_time"] >= result.stats["parsing_time"]
        assert converter.stats == result.stats

    def test_generation_options(self, users_sql):
        content = convert_sql(users_sql, {"generate": {"table_name_case": "pascal", "include_comments": False}})
        assert "export const Users = pgTable('users', {" in content
        assert "// users table" not in content

    def test_lenient_collects_diagnostics(self):
        result = SchemaConverter().convert(BAD_CLAUSE_SQL)
        assert result.summary()["diagnostics"] == 1
        assert result.diagnostics[0].code == "CLAUSE_PARSE_ERROR"
        assert "integer('id')" in result.content

    def test_strict_raises(self):
        with pytest.raises(ClauseParseError):
            SchemaConverter({"parse": {"strict_mode": True}}).convert(BAD_CLAUSE_SQL)

    def test_cycle_is_fatal(self):
        with pytest.raises(CircularDependencyError) as exc_info:
            convert_sql(CYCLE_SQL)
        assert exc_info.value.cycle == ["a", "b", "a"]

    def test_no_tables(self, caplog):
        with caplog.at_level(logging.WARNING, logger="sql2drizzle"):
            result = SchemaConverter().convert("-- nothing here\nSELECT 1;")

        assert result.tables == []
        assert result.content == "import { pgTable } from 'drizzle-orm/pg-core';\n\n"
        assert "no CREATE TABLE statements found" in caplog.text

    @pytest.mark.parametrize("dialect", ["mysql", "spanner"])
    def test_unimplemented_dialect(self, dialect, users_sql):
        converter = SchemaConverter({"dialect": dialect})
        with pytest.raises(DialectNotSupportedError) as exc_info:
            converter.convert(users_sql)
        assert dialect in exc_info.value.message

    def test_unknown_dialect(self):
        with pytest.raises(ConfigurationError):
            SchemaConverter({"dialect": "oracle"})

    def test_convert_file(self, tmp_path, users_sql):
        source = tmp_path / "schema.sql"
        source.write_text(users_sql, encoding="utf-8")
        target = tmp_path / "db" / "schema.ts"

        result = SchemaConverter().convert_file(source, target)

        assert target.read_text(encoding="utf-8") == result.content


class TestDialectRegistry:

    def test_default_dialects(self):
        assert isinstance(get_parser("pg"), PostgreSQLParser)
        assert isinstance(get_parser(), PostgreSQLParser)
        assert isinstance(get_generator(Dialect.POSTGRESQL), PostgreSQLSchemaGenerator)
        assert isinstance(get_generator("mysql"), MySQLGenerator)

    def test_parse_sql_content(self, users_sql):
        assert parse_sql_content(users_sql).table_names() == ["users"]

    def test_empty_registry(self):
        with pytest.raises(DialectNotSupportedError):
            DialectRegistry().get_parser(Dialect.POSTGRESQL)

    def test_register_checks_dialect(self):
        with pytest.raises(ValueError):
            DialectRegistry().register(SpannerParser, MySQLGenerator)

    def test_register_checks_types(self):
        with pytest.raises(TypeError):
            DialectRegistry().register(PostgreSQLSchemaGenerator, PostgreSQLSchemaGenerator)

    def test_register(self):
        registry = DialectRegistry()
        registry.register(PostgreSQLParser, PostgreSQLSchemaGenerator)
        assert registry.dialects() == [Dialect.POSTGRESQL]


class TestTypeDetailsReachOutput:

    @pytest.mark.parametrize("sql, expected", [
        (
            "CREATE TABLE e (at TIMESTAMPTZ(3) NOT NULL);",
            "at: timestamp('at', { precision: 3, withTimezone: true }).notNull()",
        ),
        (
            "CREATE TABLE e (at TIMETZ(0));",
            "at: time('at', { precision: 0, withTimezone: true })",
        ),
        (
            "CREATE TABLE e (nick character varying(20) DEFAULT NULL::character varying);",
            "nick: varchar('nick', { length: 20 })\n",
        ),
    ])
    def test_column_line(self, sql, expected):
        assert expected in convert_sql(sql)
