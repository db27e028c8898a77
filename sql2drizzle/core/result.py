"""
Явный результат операции разбора: значение ЛИБО структурированная ошибка.

Предупреждения (неподдерживаемые, но пропущенные конструкции) идут
отдельным списком и собираются вызывающей стороной.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

from .exceptions import ParsingError

T = TypeVar("T")


@dataclass
class Outcome(Generic[T]):
    value: Optional[T] = None
    error: Optional[ParsingError] = None
    warnings: List[ParsingError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T, warnings: Optional[List[ParsingError]] = None) -> "Outcome[T]":
        return cls(value=value, error=None, warnings=list(warnings or []))

    @classmethod
    def failure(cls, error: ParsingError, warnings: Optional[List[ParsingError]] = None) -> "Outcome[T]":
        return cls(value=None, error=error, warnings=list(warnings or []))

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
