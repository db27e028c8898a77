"""
Извлечение структуры из отдельных операторов:

- CREATE TABLE: имя таблицы + текст тела между первой '(' и парной ей ')'.
  Парность считается по токенам, поэтому скобки внутри строк, комментариев
  и аргументов типов (DECIMAL(10,2)) тело не обрезают.
- CREATE INDEX: имя, таблица, колонки, метод.
- COMMENT ON COLUMN: текст комментария колонки.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..core.exceptions import StatementParseError, UnsupportedFeatureError
from ..core.models import Index
from ..core.result import Outcome
from .splitter import split_clauses
from .tokenizer import SQLTokenizer, TokenStream, TokenType, string_literal_value


@dataclass(frozen=True)
class ExtractedTable:
    name: str
    schema: Optional[str]
    body: str


@dataclass(frozen=True)
class ExtractedIndex:
    table: str
    index: Index


@dataclass(frozen=True)
class ColumnComment:
    table: str
    column: str
    text: Optional[str]


def read_qualified_name(stream: TokenStream) -> Optional[List[str]]:
    """name ('.' name)*: список частей без кавычек либо None."""
    tok = stream.peek()
    if not tok.is_identifier():
        return None
    parts = [stream.advance().identifier_text()]
    while stream.peek().type == TokenType.DOT and stream.peek(1).is_identifier():
        stream.advance()
        parts.append(stream.advance().identifier_text())
    return parts


def read_name_list(stream: TokenStream) -> Optional[List[str]]:
    """'(' name {',' name} ')': простой список имён колонок."""
    if stream.accept_type(TokenType.LPAREN) is None:
        return None
    names: List[str] = []
    while True:
        tok = stream.peek()
        if not tok.is_identifier():
            return None
        names.append(stream.advance().identifier_text())
        if stream.accept_type(TokenType.COMMA):
            continue
        if stream.accept_type(TokenType.RPAREN):
            return names
        return None


class TableExtractor:
    def __init__(self, tokenizer: Optional[SQLTokenizer] = None):
        self.tokenizer = tokenizer or SQLTokenizer()

    # ==========================================================
    # CREATE TABLE
    # ==========================================================

    def extract_table(self, statement: str) -> Outcome[ExtractedTable]:
        stream = TokenStream(self.tokenizer.tokenize(statement), statement)

        if not stream.accept("CREATE"):
            return Outcome.failure(StatementParseError("not a CREATE TABLE statement", statement))
        while stream.accept("TEMP", "TEMPORARY", "UNLOGGED", "GLOBAL", "LOCAL"):
            pass
        if not stream.accept("TABLE"):
            return Outcome.failure(StatementParseError("not a CREATE TABLE statement", statement))
        stream.accept_sequence("IF", "NOT", "EXISTS")

        parts = read_qualified_name(stream)
        if not parts:
            return Outcome.failure(
                StatementParseError("could not extract table name from statement", statement, stream.peek().position)
            )
        schema = parts[-2] if len(parts) > 1 else None
        name = parts[-1]

        if stream.at_keyword("AS", "PARTITION") or stream.peek().upper == "OF":
            return Outcome.failure(
                UnsupportedFeatureError(f"CREATE TABLE {name} {stream.peek().upper} ...", clause=statement, table=name)
            )

        if stream.peek().type != TokenType.LPAREN:
            return Outcome.failure(
                StatementParseError(
                    f"could not extract table body from statement (expected '(' after {name})",
                    statement,
                    stream.peek().position,
                )
            )

        start, end, closed = stream.skip_balanced()
        if not closed:
            return Outcome.failure(
                StatementParseError(f"unbalanced parentheses in body of table {name}", statement, start)
            )

        return Outcome.success(ExtractedTable(name=name, schema=schema, body=statement[start:end]))

    # ==========================================================
    # CREATE INDEX
    # ==========================================================

    def extract_index(self, statement: str) -> Outcome[ExtractedIndex]:
        stream = TokenStream(self.tokenizer.tokenize(statement), statement)

        if not stream.accept("CREATE"):
            return Outcome.failure(StatementParseError("not a CREATE INDEX statement", statement))
        unique = stream.accept("UNIQUE") is not None
        if not stream.accept("INDEX"):
            return Outcome.failure(StatementParseError("not a CREATE INDEX statement", statement))
        stream.accept("CONCURRENTLY")
        stream.accept_sequence("IF", "NOT", "EXISTS")

        index_name: Optional[str] = None
        if not stream.at_keyword("ON"):
            parts = read_qualified_name(stream)
            if not parts:
                return Outcome.failure(StatementParseError("could not extract index name", statement))
            index_name = parts[-1]

        if not stream.accept("ON"):
            return Outcome.failure(StatementParseError("expected ON <table> in CREATE INDEX", statement))
        stream.accept("ONLY")

        table_parts = read_qualified_name(stream)
        if not table_parts:
            return Outcome.failure(StatementParseError("could not extract indexed table name", statement))
        table = table_parts[-1]

        method: Optional[str] = None
        if stream.accept("USING"):
            method = stream.advance().value.upper()

        if stream.peek().type != TokenType.LPAREN:
            return Outcome.failure(StatementParseError("expected column list in CREATE INDEX", statement))
        start, end, closed = stream.skip_balanced()
        if not closed:
            return Outcome.failure(StatementParseError("unbalanced parentheses in CREATE INDEX", statement, start))

        columns = self._index_columns(statement[start:end])
        if index_name is None:
            index_name = f"{table}_{'_'.join(columns)}_idx"

        return Outcome.success(
            ExtractedIndex(table=table, index=Index(name=index_name, columns=tuple(columns), unique=unique, method=method))
        )

    def _index_columns(self, text: str) -> List[str]:
        columns: List[str] = []
        for element in split_clauses(text):
            stream = TokenStream(self.tokenizer.tokenize(element), element)
            tok = stream.peek()
            # простая колонка (возможно с ASC/DESC/NULLS ...) либо выражение как есть
            if tok.is_identifier() and stream.peek(1).type in (TokenType.EOF, TokenType.KEYWORD, TokenType.IDENTIFIER):
                columns.append(tok.identifier_text())
            else:
                columns.append(element.strip())
        return columns

    # ==========================================================
    # COMMENT ON COLUMN
    # ==========================================================

    def extract_comment(self, statement: str) -> Outcome[Optional[ColumnComment]]:
        """COMMENT ON COLUMN t.c IS '...'; прочие COMMENT ON дают пустой результат."""
        stream = TokenStream(self.tokenizer.tokenize(statement), statement)

        if not stream.accept_sequence("COMMENT", "ON"):
            return Outcome.failure(StatementParseError("not a COMMENT statement", statement))
        if not stream.accept("COLUMN"):
            return Outcome.success(None)

        parts = read_qualified_name(stream)
        if not parts or len(parts) < 2:
            return Outcome.failure(StatementParseError("expected <table>.<column> in COMMENT ON COLUMN", statement))
        table, column = parts[-2], parts[-1]

        if not stream.accept("IS"):
            return Outcome.failure(StatementParseError("expected IS in COMMENT ON COLUMN", statement))

        tok = stream.advance()
        if tok.type == TokenType.STRING:
            return Outcome.success(ColumnComment(table, column, string_literal_value(tok)))
        if tok.is_keyword("NULL"):
            return Outcome.success(ColumnComment(table, column, None))
        return Outcome.failure(StatementParseError("expected string literal in COMMENT ON COLUMN", statement))

