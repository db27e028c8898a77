"""
Statement and clause splitting tests.

Run with:
    pytest tests/test_splitter.py -v
"""

from sql2drizzle.parser.splitter import StatementSplitter, split_clauses, split_statements


class TestStatementSplitter:

    def test_splits_on_terminator(self):
        assert split_statements("SELECT 1; SELECT 2;") == ["SELECT 1", "SELECT 2"]

    def test_final_unterminated_fragment_is_kept(self):
        assert split_statements("SELECT 1; SELECT 2") == ["SELECT 1", "SELECT 2"]

    def test_blank_statements_are_dropped(self):
        assert split_statements(";;  ;\n") == []

    def test_terminator_inside_string(self):
        assert split_statements("INSERT INTO t VALUES ('a;b'); SELECT 2") == [
            "INSERT INTO t VALUES ('a;b')",
            "SELECT 2",
        ]

    def test_terminator_inside_quoted_identifier(self):
        assert split_statements('CREATE TABLE "a;b" (id INT); SELECT 1') == [
            'CREATE TABLE "a;b" (id INT)',
            "SELECT 1",
        ]

    def test_backslash_escaped_quote_does_not_close_string(self):
        sql = "SELECT 'it\\'s; still'; SELECT 2"
        assert split_statements(sql) == ["SELECT 'it\\'s; still'", "SELECT 2"]

    def test_escaped_backslash_before_closing_quote(self):
        sql = "SELECT 'C:\\\\'; SELECT 2"
        assert split_statements(sql) == ["SELECT 'C:\\\\'", "SELECT 2"]

    def test_odd_backslash_run_escapes_quote(self):
        sql = "SELECT 'a\\\\\\'; b'; SELECT 2"
        assert split_statements(sql) == ["SELECT 'a\\\\\\'; b'", "SELECT 2"]

    def test_terminator_inside_line_comment(self):
        sql = "-- first; not a boundary\nSELECT 1; SELECT 2"
        assert split_statements(sql) == ["-- first; not a boundary\nSELECT 1", "SELECT 2"]

    def test_terminator_inside_block_comment(self):
        assert split_statements("/* a; b */ SELECT 1; SELECT 2") == ["/* a; b */ SELECT 1", "SELECT 2"]

    def test_dollar_quoted_body(self):
        sql = "CREATE FUNCTION f() RETURNS void AS $$ BEGIN NULL; END $$ LANGUAGE plpgsql; SELECT 1"
        statements = split_statements(sql)
        assert len(statements) == 2
        assert statements[0].endswith("LANGUAGE plpgsql")

    def test_unterminated_quote_swallows_rest(self):
        assert split_statements("SELECT 'abc; SELECT 2") == ["SELECT 'abc; SELECT 2"]

    def test_custom_terminator(self):
        assert StatementSplitter(terminator="/").split("a / b") == ["a", "b"]


class TestSplitClauses:

    def test_commas_inside_parens_are_not_boundaries(self):
        body = "id INT, price DECIMAL(10,2) NOT NULL, total NUMERIC DEFAULT coalesce(a, b)"
        assert split_clauses(body) == [
            "id INT",
            "price DECIMAL(10,2) NOT NULL",
            "total NUMERIC DEFAULT coalesce(a, b)",
        ]

    def test_commas_inside_strings_are_not_boundaries(self):
        assert split_clauses("note TEXT DEFAULT 'a, b', id INT") == ["note TEXT DEFAULT 'a, b'", "id INT"]

    def test_trailing_comma_is_tolerated(self):
        assert split_clauses("id INT,\n") == ["id INT"]
