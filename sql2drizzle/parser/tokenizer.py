from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class TokenType(str, Enum):
    KEYWORD = "KEYWORD"
    IDENTIFIER = "IDENTIFIER"
    QUOTED_IDENTIFIER = "QUOTED_IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    OPERATOR = "OPERATOR"
    COMMA = "COMMA"
    DOT = "DOT"
    SEMICOLON = "SEMICOLON"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    LBRACKET = "LBRACKET"
    RBRACKET = "RBRACKET"

    WHITESPACE = "WHITESPACE"
    NEWLINE = "NEWLINE"
    COMMENT = "COMMENT"

    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    line: int
    column: int
    position: int
    end: int

    @property
    def upper(self) -> str:
        return self.value.upper()

    def is_word(self) -> bool:
        """Слово: ключевое слово или обычный идентификатор."""
        return self.type in (TokenType.KEYWORD, TokenType.IDENTIFIER)

    def is_identifier(self) -> bool:
        return self.type in (TokenType.IDENTIFIER, TokenType.QUOTED_IDENTIFIER, TokenType.KEYWORD)

    def is_keyword(self, *words: str) -> bool:
        if not self.is_word():
            return False
        return not words or self.upper in words

    def identifier_text(self) -> str:
        """Имя без кавычек ("User" → User, "" → ")."""
        if self.type == TokenType.QUOTED_IDENTIFIER:
            return self.value[1:-1].replace('""', '"')
        return self.value


def string_literal_value(token: Token) -> str:
    """Содержимое строкового литерала: без кавычек, '' → ', для E'...' снимаются \\-escape."""
    raw = token.value
    escaped = raw[:1] in ("E", "e")
    if escaped:
        raw = raw[1:]
    inner = raw[1:-1].replace("''", "'")
    if escaped:
        inner = re.sub(r"\\(.)", lambda m: {"n": "\n", "t": "\t", "r": "\r"}.get(m.group(1), m.group(1)), inner)
    return inner


class SQLTokenizer:
    """
    Лексический анализатор DDL
    Делает токены + позиционную разметку (line/column/position/end).
    """

    KEYWORDS = {
        "CREATE", "ALTER", "DROP", "TABLE", "INDEX", "SCHEMA", "COLUMN", "COMMENT",
        "CONSTRAINT", "PRIMARY", "KEY", "FOREIGN", "REFERENCES",
        "UNIQUE", "CHECK", "DEFAULT", "NOT", "NULL", "COLLATE",
        "GENERATED", "ALWAYS", "AS", "IDENTITY", "BY",
        "IF", "EXISTS", "ON", "IS", "USING", "ONLY",
        "DELETE", "UPDATE", "CASCADE", "RESTRICT", "SET", "NO", "ACTION", "MATCH",
        "DEFERRABLE", "INITIALLY", "DEFERRED", "IMMEDIATE",
        "WITH", "WITHOUT", "TIME", "ZONE",
        "TEMP", "TEMPORARY", "UNLOGGED",
    }

    # NEWLINE ДО WHITESPACE, иначе \s+ “съест” \n и NEWLINE никогда не появится
    _TOKEN_SPECS: List[Tuple[str, TokenType]] = [
        (r"--[^\n]*", TokenType.COMMENT),
        (r"/\*[\s\S]*?\*/", TokenType.COMMENT),
        (r"\r\n|\r|\n", TokenType.NEWLINE),
        (r"[ \t\f\v]+", TokenType.WHITESPACE),

        (r"[Ee]'(?:[^'\\]|\\.|'')*'", TokenType.STRING),
        (r"'(?:[^']|'')*'", TokenType.STRING),
        (r'"(?:[^"]|"")*"', TokenType.QUOTED_IDENTIFIER),

        (r"\d+\.\d*(?:[eE][+-]?\d+)?", TokenType.NUMBER),
        (r"\.\d+(?:[eE][+-]?\d+)?", TokenType.NUMBER),
        (r"\d+(?:[eE][+-]?\d+)?", TokenType.NUMBER),

        (r"::|<=|>=|<>|!=|\|\||->>|->|#>>|#>|@>|<@|&&", TokenType.OPERATOR),
        (r"[=<>!@#%^&|*/+\-~:?]", TokenType.OPERATOR),

        (r",", TokenType.COMMA),
        (r"\.", TokenType.DOT),
        (r";", TokenType.SEMICOLON),
        (r"\(", TokenType.LPAREN),
        (r"\)", TokenType.RPAREN),
        (r"\[", TokenType.LBRACKET),
        (r"\]", TokenType.RBRACKET),

        (r"[A-Za-z_][A-Za-z0-9_$]*", TokenType.IDENTIFIER),
    ]

    def __init__(self):
        parts = []
        for i, (pat, _) in enumerate(self._TOKEN_SPECS):
            parts.append(f"(?P<T{i}>{pat})")
        self._master = re.compile("|".join(parts))

        # отображение group name -> TokenType
        self._group_to_type = {f"T{i}": t for i, (_, t) in enumerate(self._TOKEN_SPECS)}

    def tokenize(self, sql_text: str) -> List[Token]:
        """
        Токенизация за один проход.
        Возвращает токены без WHITESPACE/COMMENT/NEWLINE, последним идёт EOF.
        Регистр значений сохраняется: имена колонок уходят в выходной код как есть.
        """
        tokens: List[Token] = []
        line = 1
        col = 1

        pos = 0
        n = len(sql_text)

        while pos < n:
            m = self._master.match(sql_text, pos)
            if not m:
                # незакрытая строка/кавычка или неизвестный символ:
                # 1 символ как OPERATOR, чтобы не зависнуть
                value = sql_text[pos]
                tokens.append(Token(TokenType.OPERATOR, value, line, col, pos, pos + 1))
                pos += 1
                col += 1
                continue

            group = m.lastgroup
            assert group is not None
            base_type = self._group_to_type[group]
            value = m.group(group)
            start = pos
            start_line, start_col = line, col

            # координаты обновляем ДО фильтрации
            newlines = value.count("\n")
            if newlines:
                line += newlines
                col = len(value) - value.rfind("\n")
            else:
                col += len(value)

            pos = m.end()

            # фильтрация шума
            if base_type in (TokenType.WHITESPACE, TokenType.COMMENT, TokenType.NEWLINE):
                continue

            precise = self._determine_token_type(base_type, value)
            tokens.append(Token(precise, value, start_line, start_col, start, pos))

        tokens.append(Token(TokenType.EOF, "", line, col, pos, pos))
        return tokens

    def _determine_token_type(self, base_type: TokenType, value: str) -> TokenType:
        if base_type != TokenType.IDENTIFIER:
            return base_type
        if value.upper() in self.KEYWORDS:
            return TokenType.KEYWORD
        return TokenType.IDENTIFIER


class TokenStream:
    """
    Курсор по списку токенов для рекурсивного спуска.
    Последний токен всегда EOF.
    """

    def __init__(self, tokens: List[Token], source: str = ""):
        if not tokens or tokens[-1].type != TokenType.EOF:
            end = len(source)
            tokens = list(tokens) + [Token(TokenType.EOF, "", 0, 0, end, end)]
        self.tokens = tokens
        self.source = source
        self.index = 0

    def peek(self, offset: int = 0) -> Token:
        i = min(self.index + offset, len(self.tokens) - 1)
        return self.tokens[i]

    def advance(self) -> Token:
        tok = self.peek()
        if tok.type != TokenType.EOF:
            self.index += 1
        return tok

    def at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def at_keyword(self, *words: str) -> bool:
        return self.peek().is_keyword(*words)

    def at_sequence(self, *words: str) -> bool:
        return all(self.peek(i).is_keyword(w) for i, w in enumerate(words))

    def accept(self, *words: str) -> Optional[Token]:
        if self.at_keyword(*words):
            return self.advance()
        return None

    def accept_sequence(self, *words: str) -> bool:
        if self.at_sequence(*words):
            for _ in words:
                self.advance()
            return True
        return False

    def accept_type(self, token_type: TokenType) -> Optional[Token]:
        if self.peek().type == token_type:
            return self.advance()
        return None

    def skip_balanced(self) -> Tuple[int, int, bool]:
        """
        Пропускает группу в скобках, начиная с '(' под курсором.
        Возвращает (start, end, closed): позиции содержимого без внешних скобок
        и признак того, что нашлась парная ')'.
        Несбалансированная группа съедается до EOF.
        """
        open_tok = self.advance()
        depth = 1
        start = open_tok.end
        end = start
        while not self.at_end():
            tok = self.advance()
            if tok.type == TokenType.LPAREN:
                depth += 1
            elif tok.type == TokenType.RPAREN:
                depth -= 1
                if depth == 0:
                    return start, tok.position, True
            end = tok.end
        return start, end, False

    def text(self, start: int, end: int) -> str:
        return self.source[start:end].strip()


def strip_cast(tokens: List[Token]) -> List[Token]:
    """Отрезает хвост '::type' на глубине скобок 0."""
    depth = 0
    for i, tok in enumerate(tokens):
        if tok.type == TokenType.LPAREN:
            depth += 1
        elif tok.type == TokenType.RPAREN:
            depth -= 1
        elif depth == 0 and tok.type == TokenType.OPERATOR and tok.value == "::":
            return tokens[:i]
    return tokens


def strip_parens(tokens: List[Token]) -> List[Token]:
    """(expr) → expr, если внешние скобки парные друг другу."""
    while len(tokens) >= 2 and tokens[0].type == TokenType.LPAREN and tokens[-1].type == TokenType.RPAREN:
        depth = 0
        for i, tok in enumerate(tokens):
            if tok.type == TokenType.LPAREN:
                depth += 1
            elif tok.type == TokenType.RPAREN:
                depth -= 1
            if depth == 0 and i < len(tokens) - 1:
                return tokens
        tokens = tokens[1:-1]
    return tokens
