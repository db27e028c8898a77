"""
Разбор тела CREATE TABLE рекурсивным спуском.

Тело делится на определения по запятым верхнего уровня, затем каждое
определение классифицируется:
- CONSTRAINT / PRIMARY KEY / FOREIGN KEY / CHECK / UNIQUE → ограничение таблицы,
- всё остальное → колонка.

Грамматика колонки:
    column      := name type column_tail*
    type        := word+ ['(' int [',' int] ')'] [(WITH|WITHOUT) TIME ZONE] ('[' [int] ']')*
    column_tail := [CONSTRAINT name] (NOT NULL | NULL | UNIQUE | PRIMARY KEY | DEFAULT expr
                 | REFERENCES table ['(' cols ')'] fk_actions | CHECK '(' expr ')'
                 | COLLATE name | GENERATED ... AS IDENTITY)

Каждая операция возвращает Outcome: значение либо структурированную ошибку.
Политика strict/lenient применяется в parse_table().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..core.exceptions import ClauseParseError, ParsingError, UnsupportedFeatureError
from ..core.models import Column, Constraint, ConstraintType, ForeignKey, Table, TableDraft
from ..core.result import Outcome
from .extractor import ExtractedTable, read_name_list, read_qualified_name
from .splitter import split_clauses
from .tokenizer import SQLTokenizer, Token, TokenStream, TokenType, strip_cast, strip_parens


# продолжения многословных типов: DOUBLE PRECISION, CHARACTER VARYING, ...
_TYPE_CONTINUATIONS = {
    "DOUBLE": ("PRECISION",),
    "CHARACTER": ("VARYING",),
    "NATIONAL": ("CHARACTER",),
    "BIT": ("VARYING",),
}

_INTERVAL_FIELDS = {"YEAR", "MONTH", "DAY", "HOUR", "MINUTE", "SECOND", "TO"}

# типы, у которых аргументы в скобках задают точность (и масштаб), а не длину
PRECISION_TYPES = {"DECIMAL", "NUMERIC", "TIMESTAMP", "TIMESTAMPTZ", "TIME", "TIMETZ", "INTERVAL"}

SERIAL_TYPES = {"SERIAL", "BIGSERIAL", "SMALLSERIAL", "SERIAL2", "SERIAL4", "SERIAL8"}

# слова, на которых заканчивается выражение DEFAULT
_DEFAULT_STOP_WORDS = {
    "NOT", "NULL", "UNIQUE", "PRIMARY", "REFERENCES", "CHECK",
    "CONSTRAINT", "COLLATE", "GENERATED", "DEFAULT",
}

_CONSTRAINT_PREFIXES = (
    ("CONSTRAINT",),
    ("PRIMARY", "KEY"),
    ("FOREIGN", "KEY"),
    ("CHECK",),
    ("UNIQUE",),
)

_FK_ACTIONS = ("CASCADE", "RESTRICT", "NO ACTION", "SET NULL", "SET DEFAULT")


@dataclass
class ClauseResult:
    """Вклад одного определения в таблицу."""
    columns: List[Column] = field(default_factory=list)
    primary_key: List[str] = field(default_factory=list)
    foreign_keys: List[ForeignKey] = field(default_factory=list)
    constraints: List[Constraint] = field(default_factory=list)

    def apply(self, draft: TableDraft) -> None:
        draft.columns.extend(self.columns)
        draft.add_primary_key(self.primary_key)
        draft.foreign_keys.extend(self.foreign_keys)
        draft.constraints.extend(self.constraints)


@dataclass
class _TypeInfo:
    name: str
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    array_dimensions: int = 0


class ClauseParser:
    def __init__(self, tokenizer: Optional[SQLTokenizer] = None):
        self.tokenizer = tokenizer or SQLTokenizer()

    # ==========================================================
    # PUBLIC API
    # ==========================================================

    def parse_table(self, extracted: ExtractedTable, strict_mode: bool = False) -> Outcome[Table]:
        """
        Собирает Table из тела CREATE TABLE.

        lenient: ошибочное определение пропускается, ошибка уходит в warnings.
        strict: первая ошибка (или неподдерживаемая конструкция) прерывает таблицу.
        """
        draft = TableDraft(name=extracted.name, schema=extracted.schema)
        warnings: List[ParsingError] = []

        for clause in split_clauses(extracted.body):
            outcome = self.parse_clause(clause, extracted.name)

            if not outcome.ok:
                if strict_mode:
                    return Outcome.failure(outcome.error, warnings)
                warnings.append(outcome.error)
                continue

            if strict_mode and outcome.warnings:
                return Outcome.failure(outcome.warnings[0], warnings)
            warnings.extend(outcome.warnings)

            duplicate = self._find_duplicate(draft, outcome.value)
            if duplicate:
                error = ClauseParseError(
                    f"duplicate column '{duplicate}' in table {extracted.name}",
                    clause=clause,
                    table=extracted.name,
                )
                if strict_mode:
                    return Outcome.failure(error, warnings)
                warnings.append(error)
                continue

            outcome.value.apply(draft)

        return Outcome.success(draft.freeze(), warnings)

    def parse_clause(self, clause: str, table: str) -> Outcome[ClauseResult]:
        stream = TokenStream(self.tokenizer.tokenize(clause), clause)
        if stream.at_end():
            # только комментарий
            return Outcome.success(ClauseResult())
        if self.is_constraint(stream):
            return self.parse_constraint(stream, table)
        if stream.at_keyword("LIKE", "EXCLUDE"):
            return Outcome.failure(
                UnsupportedFeatureError(f"{stream.peek().upper} table element", clause=clause, table=table)
            )
        return self.parse_column(stream, table)

    @staticmethod
    def is_constraint(stream: TokenStream) -> bool:
        return any(stream.at_sequence(*prefix) for prefix in _CONSTRAINT_PREFIXES)

    # ==========================================================
    # COLUMN
    # ==========================================================

    def parse_column(self, stream: TokenStream, table: str) -> Outcome[ClauseResult]:
        clause = stream.source
        name_tok = stream.peek()
        if not name_tok.is_identifier():
            return Outcome.failure(self._error("could not parse column definition", clause, table, "column name", name_tok))
        name = stream.advance().identifier_text()

        type_outcome = self._parse_type(stream, clause, table)
        if not type_outcome.ok:
            return Outcome.failure(type_outcome.error)
        type_info = type_outcome.value

        result = ClauseResult()
        warnings: List[ParsingError] = []
        not_null = False
        unique = False
        default_value: Optional[str] = None
        auto_increment = type_info.name in SERIAL_TYPES
        constraint_name: Optional[str] = None
        unknown: List[str] = []

        while not stream.at_end():
            if stream.accept("CONSTRAINT"):
                tok = stream.peek()
                if not tok.is_identifier():
                    return Outcome.failure(self._error("expected constraint name", clause, table, "identifier", tok))
                constraint_name = stream.advance().identifier_text()
                continue

            if stream.accept_sequence("NOT", "NULL"):
                not_null = True
            elif stream.accept("NULL"):
                pass
            elif stream.accept("UNIQUE"):
                unique = True
                self._skip_nulls_distinct(stream)
            elif stream.accept_sequence("PRIMARY", "KEY"):
                result.primary_key.append(name)
            elif stream.accept("DEFAULT"):
                expr = self._read_default(stream)
                if expr is None:
                    return Outcome.failure(self._error("DEFAULT without expression", clause, table, "expression", stream.peek()))
                if _is_nextval(expr):
                    auto_increment = True
                elif not self._is_null(expr):
                    default_value = expr
            elif stream.accept("REFERENCES"):
                ref = self._parse_references(stream, clause, table)
                if not ref.ok:
                    return Outcome.failure(ref.error)
                ref_table, ref_cols, on_delete, on_update = ref.value
                result.foreign_keys.append(ForeignKey(
                    name=constraint_name or f"{table}_{name}_fkey",
                    columns=(name,),
                    referenced_table=ref_table,
                    referenced_columns=tuple(ref_cols),
                    on_delete=on_delete,
                    on_update=on_update,
                ))
            elif stream.accept("CHECK"):
                expr = self._read_group(stream)
                if expr is None:
                    return Outcome.failure(self._error("expected '(' after CHECK", clause, table, "(", stream.peek()))
                stream.accept_sequence("NO", "INHERIT")
                result.constraints.append(Constraint(
                    name=constraint_name or f"{table}_{name}_check",
                    type=ConstraintType.CHECK,
                    columns=(name,),
                    expression=expr,
                ))
            elif stream.accept("COLLATE"):
                if not read_qualified_name(stream):
                    return Outcome.failure(self._error("expected collation name", clause, table, "identifier", stream.peek()))
            elif stream.accept("GENERATED"):
                identity = self._parse_generated(stream)
                if identity:
                    auto_increment = True
                else:
                    warnings.append(UnsupportedFeatureError("generated column expression", clause=clause, table=table))
            elif self._skip_deferrable(stream):
                pass
            else:
                tok = stream.advance()
                unknown.append(tok.value)
                if tok.type == TokenType.LPAREN:
                    stream.index -= 1
                    self._read_group(stream)
                    unknown[-1] = "(...)"
                continue

            constraint_name = None

        if unknown:
            warnings.append(UnsupportedFeatureError(
                f"column option '{' '.join(unknown)}'", clause=clause, table=table
            ))

        result.columns.append(Column(
            name=name,
            type=type_info.name,
            length=type_info.length,
            precision=type_info.precision,
            scale=type_info.scale,
            not_null=not_null,
            unique=unique,
            default_value=default_value,
            auto_increment=auto_increment,
            array_dimensions=type_info.array_dimensions,
        ))
        return Outcome.success(result, warnings)

    def _parse_type(self, stream: TokenStream, clause: str, table: str) -> Outcome[_TypeInfo]:
        tok = stream.peek()
        if not tok.is_identifier():
            return Outcome.failure(self._error("could not parse column definition", clause, table, "data type", tok))

        words = [stream.advance().identifier_text().upper()]
        # схема.тип → берём имя типа
        while stream.peek().type == TokenType.DOT and stream.peek(1).is_identifier():
            stream.advance()
            words = [stream.advance().identifier_text().upper()]
        while stream.peek().is_word() and stream.peek().upper in _TYPE_CONTINUATIONS.get(words[-1], ()):
            words.append(stream.advance().upper)

        info = _TypeInfo(name=" ".join(words))

        if stream.peek().type == TokenType.LPAREN:
            args = self._read_int_args(stream)
            if args:
                if words[0] in PRECISION_TYPES:
                    info.precision = args[0]
                    info.scale = args[1] if len(args) > 1 else None
                else:
                    info.length = args[0]

        if words[-1] in ("TIMESTAMP", "TIME"):
            if stream.accept_sequence("WITH", "TIME", "ZONE"):
                words += ["WITH", "TIME", "ZONE"]
            elif stream.accept_sequence("WITHOUT", "TIME", "ZONE"):
                words += ["WITHOUT", "TIME", "ZONE"]
        elif words[-1] == "INTERVAL":
            while stream.peek().is_word() and stream.peek().upper in _INTERVAL_FIELDS:
                stream.advance()
        info.name = " ".join(words)

        while True:
            if stream.accept_type(TokenType.LBRACKET):
                stream.accept_type(TokenType.NUMBER)
                if stream.accept_type(TokenType.RBRACKET) is None:
                    return Outcome.failure(self._error("unterminated array type", clause, table, "]", stream.peek()))
                info.array_dimensions += 1
            elif stream.peek().is_keyword("ARRAY"):
                stream.advance()
                info.array_dimensions += 1
            else:
                break

        return Outcome.success(info)

    def _read_int_args(self, stream: TokenStream) -> List[int]:
        """'(' int [',' int] ')'; для нечисловых аргументов группа пропускается."""
        save = stream.index
        stream.advance()
        args: List[int] = []
        while True:
            tok = stream.peek()
            if tok.type != TokenType.NUMBER or not tok.value.isdigit():
                break
            args.append(int(stream.advance().value))
            if stream.accept_type(TokenType.COMMA):
                continue
            if stream.accept_type(TokenType.RPAREN):
                return args
            break
        stream.index = save
        self._read_group(stream)
        return []

    def _read_default(self, stream: TokenStream) -> Optional[str]:
        """Выражение DEFAULT: до следующего ключевого слова ограничения на глубине 0."""
        if stream.at_end():
            return None
        first = stream.peek()
        end = first.end
        depth = 0
        count = 0
        while not stream.at_end():
            tok = stream.peek()
            if depth == 0 and count > 0 and tok.is_word() and tok.upper in _DEFAULT_STOP_WORDS:
                break
            if depth == 0 and tok.type == TokenType.RPAREN:
                break
            stream.advance()
            count += 1
            if tok.type == TokenType.LPAREN:
                depth += 1
            elif tok.type == TokenType.RPAREN:
                depth -= 1
            end = tok.end
        return stream.source[first.position:end].strip()

    def _is_null(self, expr: str) -> bool:
        """NULL, NULL::type или (NULL): значения по умолчанию нет."""
        tokens = [t for t in self.tokenizer.tokenize(expr) if t.type != TokenType.EOF]
        tokens = strip_parens(strip_cast(tokens))
        return len(tokens) == 1 and tokens[0].is_keyword("NULL")

    def _parse_generated(self, stream: TokenStream) -> bool:
        """GENERATED {ALWAYS | BY DEFAULT} AS {IDENTITY [(...)] | (expr) STORED}; True для IDENTITY."""
        if not stream.accept("ALWAYS"):
            stream.accept_sequence("BY", "DEFAULT")
        stream.accept("AS")
        if stream.accept("IDENTITY"):
            if stream.peek().type == TokenType.LPAREN:
                self._read_group(stream)
            return True
        if stream.peek().type == TokenType.LPAREN:
            self._read_group(stream)
        stream.accept("STORED")
        return False

    # ==========================================================
    # TABLE CONSTRAINT
    # ==========================================================

    def parse_constraint(self, stream: TokenStream, table: str) -> Outcome[ClauseResult]:
        clause = stream.source
        result = ClauseResult()
        warnings: List[ParsingError] = []

        name: Optional[str] = None
        if stream.accept("CONSTRAINT"):
            tok = stream.peek()
            if not tok.is_identifier():
                return Outcome.failure(self._error("expected constraint name", clause, table, "identifier", tok))
            name = stream.advance().identifier_text()

        if stream.accept_sequence("PRIMARY", "KEY"):
            cols = read_name_list(stream)
            if not cols:
                return Outcome.failure(self._error("could not parse PRIMARY KEY column list", clause, table, "(columns)", stream.peek()))
            result.primary_key.extend(cols)

        elif stream.accept_sequence("FOREIGN", "KEY"):
            cols = read_name_list(stream)
            if not cols:
                return Outcome.failure(self._error("could not parse FOREIGN KEY column list", clause, table, "(columns)", stream.peek()))
            if not stream.accept("REFERENCES"):
                return Outcome.failure(self._error("expected REFERENCES in FOREIGN KEY", clause, table, "REFERENCES", stream.peek()))
            ref = self._parse_references(stream, clause, table)
            if not ref.ok:
                return Outcome.failure(ref.error)
            ref_table, ref_cols, on_delete, on_update = ref.value
            result.foreign_keys.append(ForeignKey(
                name=name or f"{table}_{'_'.join(cols)}_fkey",
                columns=tuple(cols),
                referenced_table=ref_table,
                referenced_columns=tuple(ref_cols),
                on_delete=on_delete,
                on_update=on_update,
            ))

        elif stream.accept("UNIQUE"):
            self._skip_nulls_distinct(stream)
            cols = read_name_list(stream)
            if not cols:
                return Outcome.failure(self._error("could not parse UNIQUE column list", clause, table, "(columns)", stream.peek()))
            result.constraints.append(Constraint(
                name=name or f"{table}_{'_'.join(cols)}_key",
                type=ConstraintType.UNIQUE,
                columns=tuple(cols),
            ))

        elif stream.accept("CHECK"):
            expr = self._read_group(stream)
            if expr is None:
                return Outcome.failure(self._error("expected '(' after CHECK", clause, table, "(", stream.peek()))
            stream.accept_sequence("NO", "INHERIT")
            result.constraints.append(Constraint(
                name=name or f"{table}_check",
                type=ConstraintType.CHECK,
                expression=expr,
            ))

        else:
            kind = stream.peek().value or "<empty>"
            return Outcome.failure(UnsupportedFeatureError(f"constraint kind '{kind}'", clause=clause, table=table))

        # хвост: DEFERRABLE, USING INDEX TABLESPACE, INCLUDE (...), ...
        while not stream.at_end():
            if self._skip_deferrable(stream):
                continue
            tok = stream.advance()
            if tok.type == TokenType.LPAREN:
                stream.index -= 1
                self._read_group(stream)
            warnings.append(UnsupportedFeatureError(f"constraint option '{tok.value}'", clause=clause, table=table))
            break

        return Outcome.success(result, warnings)

    # ==========================================================
    # HELPERS
    # ==========================================================

    def _parse_references(
        self, stream: TokenStream, clause: str, table: str
    ) -> Outcome[Tuple[str, List[str], Optional[str], Optional[str]]]:
        parts = read_qualified_name(stream)
        if not parts:
            return Outcome.failure(self._error("expected referenced table name", clause, table, "table name", stream.peek()))
        ref_cols: List[str] = []
        if stream.peek().type == TokenType.LPAREN:
            cols = read_name_list(stream)
            if cols is None:
                return Outcome.failure(self._error("could not parse referenced column list", clause, table, "(columns)", stream.peek()))
            ref_cols = cols

        on_delete: Optional[str] = None
        on_update: Optional[str] = None
        while True:
            if stream.accept("MATCH"):
                stream.advance()
            elif stream.accept_sequence("ON", "DELETE"):
                on_delete = self._read_action(stream)
                if on_delete is None:
                    return Outcome.failure(self._error("unknown ON DELETE action", clause, table, "referential action", stream.peek()))
            elif stream.accept_sequence("ON", "UPDATE"):
                on_update = self._read_action(stream)
                if on_update is None:
                    return Outcome.failure(self._error("unknown ON UPDATE action", clause, table, "referential action", stream.peek()))
            else:
                break

        return Outcome.success((parts[-1], ref_cols, on_delete, on_update))

    @staticmethod
    def _read_action(stream: TokenStream) -> Optional[str]:
        for action in _FK_ACTIONS:
            words = action.split()
            if stream.accept_sequence(*words):
                if action == "SET NULL" or action == "SET DEFAULT":
                    # PostgreSQL 15: SET NULL (col, ...)
                    if stream.peek().type == TokenType.LPAREN:
                        read_name_list(stream)
                return action
        return None

    def _read_group(self, stream: TokenStream) -> Optional[str]:
        """Содержимое скобочной группы под курсором либо None, если там не '('."""
        if stream.peek().type != TokenType.LPAREN:
            return None
        start, end, _ = stream.skip_balanced()
        return stream.text(start, end)

    @staticmethod
    def _skip_nulls_distinct(stream: TokenStream) -> None:
        if not stream.accept_sequence("NULLS", "NOT", "DISTINCT"):
            stream.accept_sequence("NULLS", "DISTINCT")

    @staticmethod
    def _skip_deferrable(stream: TokenStream) -> bool:
        if stream.accept("DEFERRABLE") or stream.accept_sequence("NOT", "DEFERRABLE"):
            return True
        if stream.accept("INITIALLY"):
            stream.accept("DEFERRED", "IMMEDIATE")
            return True
        return False

    @staticmethod
    def _find_duplicate(draft: TableDraft, result: ClauseResult) -> Optional[str]:
        existing = {c.name for c in draft.columns}
        for c in result.columns:
            if c.name in existing:
                return c.name
        return None

    @staticmethod
    def _error(message: str, clause: str, table: str, expected: str, found: Token) -> ClauseParseError:
        return ClauseParseError(
            f"{message}: {' '.join(clause.split())}",
            clause=clause,
            table=table,
            expected=expected,
            found=found.value or "end of clause",
            position=found.position,
        )


def _is_nextval(expr: str) -> bool:
    return expr.replace(" ", "").lower().startswith("nextval(")
