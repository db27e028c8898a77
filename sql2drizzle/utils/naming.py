"""
utils/naming.py

Утилиты для работы с именами:
- преобразование имён в соглашения выходного кода (camel/pascal/snake/kebab),
- проверка, что имя можно использовать как идентификатор TypeScript.

Принцип:
- PostgreSQL неquoted идентификаторы приводит к lower-case, но здесь регистр
  сохраняется как в исходнике: имя колонки уходит в сгенерированный код как есть.
"""

from __future__ import annotations

import re
from enum import Enum


class NamingCase(str, Enum):
    CAMEL = "camel"     # userProfiles
    PASCAL = "pascal"   # UserProfiles
    SNAKE = "snake"     # user_profiles
    KEBAB = "kebab"     # user-profiles


_JS_IDENT_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# зарезервированные слова ES-модулей и TypeScript: не могут быть именем const
RESERVED_WORDS = frozenset({
    "break", "case", "catch", "class", "const", "continue", "debugger", "default",
    "delete", "do", "else", "enum", "export", "extends", "false", "finally", "for",
    "function", "if", "import", "in", "instanceof", "new", "null", "return", "super",
    "switch", "this", "throw", "true", "try", "typeof", "var", "void", "while", "with",
    "await", "yield", "let", "static", "implements", "interface", "package",
    "private", "protected", "public", "arguments", "eval",
})


# ==========================================================
# NAMING CASE
# ==========================================================

def to_camel_case(name: str) -> str:
    words = name.split("_")
    result = words[0]
    for word in words[1:]:
        if word:
            result += word[:1].upper() + word[1:]
    return result


def to_pascal_case(name: str) -> str:
    return "".join(word[:1].upper() + word[1:] for word in name.split("_") if word)


def to_kebab_case(name: str) -> str:
    return name.replace("_", "-")


def convert_case(name: str, case: NamingCase) -> str:
    if case == NamingCase.CAMEL:
        return to_camel_case(name)
    if case == NamingCase.PASCAL:
        return to_pascal_case(name)
    if case == NamingCase.KEBAB:
        return to_kebab_case(name)
    # SNAKE: без изменений
    return name


def is_valid_identifier(name: str) -> bool:
    """True если имя можно использовать как идентификатор TypeScript без кавычек."""
    return bool(name) and bool(_JS_IDENT_RE.match(name)) and name not in RESERVED_WORDS


def property_key(name: str) -> str:
    """Ключ объекта: голое имя либо строка в кавычках."""
    if is_valid_identifier(name):
        return name
    return quote_string(name)


def property_access(obj: str, name: str) -> str:
    """obj.name либо obj['name'] для имён, не являющихся идентификаторами."""
    if is_valid_identifier(name):
        return f"{obj}.{name}"
    return f"{obj}[{quote_string(name)}]"


def quote_string(value: str) -> str:
    """Строковый литерал TypeScript в одинарных кавычках."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


__all__ = [
    "NamingCase",
    "to_camel_case",
    "to_pascal_case",
    "to_kebab_case",
    "convert_case",
    "is_valid_identifier",
    "property_key",
    "property_access",
    "quote_string",
]
