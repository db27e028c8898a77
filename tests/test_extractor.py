"""
Statement classification and CREATE TABLE / INDEX / COMMENT extraction tests.

Run with:
    pytest tests/test_extractor.py -v
"""

import pytest

from sql2drizzle.core.exceptions import StatementParseError, UnsupportedFeatureError
from sql2drizzle.parser.classifier import StatementKind, classify_statement, get_statement_type
from sql2drizzle.parser.extractor import TableExtractor


@pytest.fixture
def extractor():
    return TableExtractor()


class TestClassifier:

    @pytest.mark.parametrize("statement, kind", [
        ("CREATE TABLE users (id INT)", StatementKind.CREATE_TABLE),
        ("create table if not exists users (id int)", StatementKind.CREATE_TABLE),
        ("CREATE TEMPORARY TABLE t (id INT)", StatementKind.CREATE_TABLE),
        ("-- leading comment\nCREATE TABLE t (id INT)", StatementKind.CREATE_TABLE),
        ("CREATE INDEX idx ON users (email)", StatementKind.CREATE_INDEX),
        ("CREATE UNIQUE INDEX idx ON users (email)", StatementKind.CREATE_INDEX),
        ("COMMENT ON COLUMN users.email IS 'x'", StatementKind.COMMENT),
        ("CREATE VIEW v AS SELECT 1", StatementKind.OTHER),
        ("CREATE OR REPLACE VIEW v AS SELECT 1", StatementKind.OTHER),
        ("/* header */ CREATE UNLOGGED TABLE t (id INT)", StatementKind.CREATE_TABLE),
        ("INSERT INTO users VALUES (1)", StatementKind.OTHER),
        ("-- only a comment", StatementKind.OTHER),
    ])
    def test_classify(self, statement, kind):
        assert classify_statement(statement) == kind

    def test_statement_type(self):
        assert get_statement_type("CREATE TABLE t (id INT)") == "CREATE"
        assert get_statement_type("-- note\ncreate index i on t (a)") == "CREATE"
        assert get_statement_type("SELECT 1") == "SELECT"


class TestExtractTable:

    def test_name_and_body(self, extractor):
        outcome = extractor.extract_table("CREATE TABLE users (id INT, name TEXT)")
        assert outcome.ok
        assert outcome.value.name == "users"
        assert outcome.value.schema is None
        assert outcome.value.body == "id INT, name TEXT"

    def test_body_keeps_nested_parentheses(self, extractor):
        sql = "CREATE TABLE products (price DECIMAL(10,2) NOT NULL, qty INT CHECK (qty > 0)) WITH (fillfactor=70)"
        outcome = extractor.extract_table(sql)
        assert outcome.value.body == "price DECIMAL(10,2) NOT NULL, qty INT CHECK (qty > 0)"

    def test_parenthesis_inside_string_does_not_close_body(self, extractor):
        outcome = extractor.extract_table("CREATE TABLE t (note TEXT DEFAULT ')', id INT)")
        assert outcome.value.body == "note TEXT DEFAULT ')', id INT"

    def test_qualified_and_quoted_name(self, extractor):
        outcome = extractor.extract_table('CREATE TABLE IF NOT EXISTS public."User Accounts" (id INT)')
        assert outcome.value.schema == "public"
        assert outcome.value.name == "User Accounts"

    def test_unlogged_table(self, extractor):
        outcome = extractor.extract_table("CREATE UNLOGGED TABLE cache (k TEXT)")
        assert outcome.value.name == "cache"

    def test_missing_body(self, extractor):
        outcome = extractor.extract_table("CREATE TABLE broken")
        assert not outcome.ok
        assert isinstance(outcome.error, StatementParseError)
        assert outcome.error.sql_fragment == "CREATE TABLE broken"

    def test_missing_name(self, extractor):
        outcome = extractor.extract_table("CREATE TABLE (id INT)")
        assert isinstance(outcome.error, StatementParseError)

    def test_unbalanced_body(self, extractor):
        outcome = extractor.extract_table("CREATE TABLE t (id INT, price DECIMAL(10,2)")
        assert isinstance(outcome.error, StatementParseError)
        assert "unbalanced" in outcome.error.message

    def test_create_table_as_is_unsupported(self, extractor):
        outcome = extractor.extract_table("CREATE TABLE t AS SELECT 1")
        assert isinstance(outcome.error, UnsupportedFeatureError)


class TestExtractIndex:

    def test_unique_index(self, extractor):
        outcome = extractor.extract_index("CREATE UNIQUE INDEX idx_users_email ON users USING btree (email)")
        assert outcome.ok
        assert outcome.value.table == "users"
        index = outcome.value.index
        assert index.name == "idx_users_email"
        assert index.columns == ("email",)
        assert index.unique
        assert index.method == "BTREE"

    def test_unnamed_index_gets_generated_name(self, extractor):
        outcome = extractor.extract_index("CREATE INDEX ON posts (user_id, created_at DESC)")
        assert outcome.value.index.name == "posts_user_id_created_at_idx"
        assert outcome.value.index.columns == ("user_id", "created_at")

    def test_missing_on(self, extractor):
        outcome = extractor.extract_index("CREATE INDEX idx")
        assert isinstance(outcome.error, StatementParseError)


class TestExtractComment:

    def test_column_comment(self, extractor):
        outcome = extractor.extract_comment("COMMENT ON COLUMN users.email IS 'Primary contact'")
        assert outcome.ok
        assert (outcome.value.table, outcome.value.column, outcome.value.text) == (
            "users", "email", "Primary contact",
        )

    def test_comment_is_null(self, extractor):
        outcome = extractor.extract_comment("COMMENT ON COLUMN public.users.email IS NULL")
        assert outcome.value.table == "users"
        assert outcome.value.text is None

    def test_table_comment_is_ignored(self, extractor):
        outcome = extractor.extract_comment("COMMENT ON TABLE users IS 'Accounts'")
        assert outcome.ok
        assert outcome.value is None

    def test_missing_is(self, extractor):
        outcome = extractor.extract_comment("COMMENT ON COLUMN users.email 'x'")
        assert isinstance(outcome.error, StatementParseError)
