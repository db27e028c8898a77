"""
Разбиение SQL-текста на части верхнего уровня.

Один проход слева направо:
- строки в одинарных/двойных кавычках (кавычка после нечётного числа '\\' не закрывает строку),
- строчные комментарии -- ... и блочные /* ... */,
- dollar-quoting PostgreSQL ($$ ... $$, $tag$ ... $tag$),
- (для тела таблицы) глубина круглых скобок.

Операторы делятся по ';', определения колонок и ограничений по ',' на глубине 0.
Незакрытая кавычка не является ошибкой: остаток входа считается строкой.
"""

from __future__ import annotations

import re
from typing import List

_DOLLAR_TAG_RE = re.compile(r"\$[A-Za-z_]?[A-Za-z0-9_]*\$")


def _split_top_level(text: str, separator: str, track_parens: bool) -> List[str]:
    parts: List[str] = []
    current: List[str] = []

    in_string = False
    quote_char = ""
    depth = 0
    i = 0
    n = len(text or "")

    while i < n:
        ch = text[i]

        if in_string:
            current.append(ch)
            if ch == quote_char and not _is_escaped(text, i):
                in_string = False
                quote_char = ""
            i += 1
            continue

        # строчный комментарий: до конца строки, без поиска границ
        if ch == "-" and text.startswith("--", i):
            end = text.find("\n", i)
            end = n if end == -1 else end
            current.append(text[i:end])
            i = end
            continue

        # блочный комментарий
        if ch == "/" and text.startswith("/*", i):
            end = text.find("*/", i + 2)
            end = n if end == -1 else end + 2
            current.append(text[i:end])
            i = end
            continue

        if ch == "$":
            m = _DOLLAR_TAG_RE.match(text, i)
            if m:
                tag = m.group(0)
                end = text.find(tag, m.end())
                end = n if end == -1 else end + len(tag)
                current.append(text[i:end])
                i = end
                continue

        if ch in ("'", '"'):
            in_string = True
            quote_char = ch
        elif track_parens and ch == "(":
            depth += 1
        elif track_parens and ch == ")":
            depth -= 1
        elif ch == separator and depth == 0:
            _flush(current, parts)
            current = []
            i += 1
            continue

        current.append(ch)
        i += 1

    # последний фрагмент без разделителя тоже часть
    _flush(current, parts)
    return parts


def _is_escaped(text: str, i: int) -> bool:
    """Символ экранирован, если перед ним нечётное число обратных слэшей."""
    backslashes = 0
    j = i - 1
    while j >= 0 and text[j] == "\\":
        backslashes += 1
        j -= 1
    return backslashes % 2 == 1


def _flush(current: List[str], parts: List[str]) -> None:
    part = "".join(current).strip()
    if part:
        parts.append(part)


class StatementSplitter:
    def __init__(self, terminator: str = ";"):
        self.terminator = terminator

    def split(self, sql_text: str) -> List[str]:
        """Операторы без завершающего ';', пустые отбрасываются."""
        return _split_top_level(sql_text, self.terminator, track_parens=False)


def split_statements(sql_text: str) -> List[str]:
    return StatementSplitter().split(sql_text)


def split_clauses(body: str) -> List[str]:
    """Определения внутри тела таблицы: запятые только на глубине скобок 0."""
    return _split_top_level(body, ",", track_parens=True)
