"""
Классификация операторов через sqlparse.

sqlparse даёт тип оператора (CREATE/ALTER/...) и устойчивую лексику
с пропуском комментариев; нам нужны только ведущие ключевые слова.
"""

from __future__ import annotations

from enum import Enum
from typing import List

import sqlparse
from sqlparse import tokens as T


class StatementKind(str, Enum):
    CREATE_TABLE = "CREATE_TABLE"
    CREATE_INDEX = "CREATE_INDEX"
    COMMENT = "COMMENT"
    OTHER = "OTHER"


# модификаторы между CREATE и типом объекта
_CREATE_MODIFIERS = {
    "OR", "REPLACE", "TEMP", "TEMPORARY", "UNLOGGED", "GLOBAL", "LOCAL", "UNIQUE",
}


def leading_words(statement: str, limit: int = 8) -> List[str]:
    """Первые слова оператора (upper-case) без пробелов и комментариев."""
    parsed = sqlparse.parse(statement)
    if not parsed:
        return []

    words: List[str] = []
    for tok in parsed[0].flatten():
        if tok.is_whitespace or tok.ttype in T.Comment:
            continue
        if tok.ttype in T.Punctuation or tok.ttype in T.Literal:
            break
        words.append(tok.normalized.upper())
        if len(words) >= limit:
            break
    return words


def get_statement_type(statement: str) -> str:
    """Тип оператора по sqlparse: CREATE, ALTER, INSERT, UNKNOWN..."""
    parsed = sqlparse.parse(statement)
    if not parsed:
        return "UNKNOWN"
    return parsed[0].get_type()


def classify_statement(statement: str) -> StatementKind:
    words = leading_words(statement)
    if not words:
        return StatementKind.OTHER

    if get_statement_type(statement) == "CREATE":
        for w in words[1:]:
            if w in _CREATE_MODIFIERS:
                continue
            if w == "TABLE":
                return StatementKind.CREATE_TABLE
            if w == "INDEX":
                return StatementKind.CREATE_INDEX
            break
        return StatementKind.OTHER

    if words[:2] == ["COMMENT", "ON"]:
        return StatementKind.COMMENT

    return StatementKind.OTHER
