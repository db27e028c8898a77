"""
parser package: разбор DDL PostgreSQL
"""

from .tokenizer import SQLTokenizer, Token, TokenStream, TokenType
from .splitter import StatementSplitter, split_clauses, split_statements
from .classifier import StatementKind, classify_statement
from .extractor import TableExtractor
from .clause_parser import ClauseParser
from .postgres import PostgreSQLParser

__all__ = [
    "SQLTokenizer",
    "Token",
    "TokenStream",
    "TokenType",
    "StatementSplitter",
    "split_clauses",
    "split_statements",
    "StatementKind",
    "classify_statement",
    "TableExtractor",
    "ClauseParser",
    "PostgreSQLParser",
]
