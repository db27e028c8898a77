"""
Пакет utils: вспомогательные функции.

- naming: преобразование регистра имён и литералы TypeScript
- files: чтение SQL и атомарная запись схемы
- logger: настройка логирования
"""

from .naming import NamingCase, convert_case, to_camel_case, to_kebab_case, to_pascal_case
from .logger import setup_logger

__all__ = [
    "NamingCase",
    "convert_case",
    "to_camel_case",
    "to_kebab_case",
    "to_pascal_case",
    "setup_logger",
]
